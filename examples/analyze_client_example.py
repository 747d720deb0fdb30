"""Client example - analyze messages against a running service

Shows the caller side of the pipeline:
1. Optionally read a screenshot through POST /api/v1/ocr
2. Run AnalysisSession locally; prompts go to the server's /api/analyze proxy
3. Print the tone, score and suggested replies

Usage:
1. Start the server: GEMINI_KEY=... uvicorn overthinkr.main:app --reload
2. Run: python examples/analyze_client_example.py "k."
   or:  python examples/analyze_client_example.py --image chat.png
"""

import argparse
import asyncio
from pathlib import Path

import httpx

from overthinkr.core.config import settings
from overthinkr.core.exceptions import ValidationError
from overthinkr.services.inference_client import InferenceClient
from overthinkr.services.pipeline import AnalysisPipeline
from overthinkr.services.session import AnalysisSession


BASE_URL = "http://localhost:8000"


async def read_screenshot(path: Path) -> str:
    """Upload a screenshot and return the recognized text."""
    async with httpx.AsyncClient(base_url=BASE_URL, timeout=60.0) as client:
        response = await client.post(
            "/api/v1/ocr",
            files={"image": (path.name, path.read_bytes())},
        )
    if response.status_code != 200:
        body = response.json()
        raise SystemExit(f"OCR failed ({response.status_code}): {body.get('message')}")
    return response.json()["text"]


def print_result(session: AnalysisSession) -> None:
    result = session.result
    print("=" * 60)
    print(f"Tone:       {result.tone}")
    print(f"Score:      {result.score}/10")
    print(f"Confidence: {result.confidence}%")
    print(f"Why:        {result.explanation}")
    print("-" * 60)
    for reply in result.replies:
        print(f"[{reply.hint.value}] {reply.type}: {reply.msg}")
    print("=" * 60)


async def main() -> None:
    parser = argparse.ArgumentParser(description="Decode the subtext of a message")
    parser.add_argument("text", nargs="?", help="Message to analyze")
    parser.add_argument("--image", type=Path, help="Screenshot to read the message from")
    args = parser.parse_args()

    if args.image:
        text = await read_screenshot(args.image)
        print(f"Screenshot text: {text!r}")
    elif args.text:
        text = args.text
    else:
        parser.error("pass a message or --image")

    client = InferenceClient(
        proxy_url=f"{BASE_URL}/api/analyze",
        timeout=settings.inference.timeout_seconds,
    )
    session = AnalysisSession(AnalysisPipeline(client))

    try:
        await session.submit(text)
    except ValidationError as e:
        print(f"Nothing to analyze: {e.message}")
        return

    if session.error is not None:
        print(f"Analysis failed [{session.error.error_code}]: {session.error.user_message}")
    else:
        print_result(session)


if __name__ == "__main__":
    asyncio.run(main())
