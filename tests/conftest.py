"""Shared fixtures: model envelopes and analysis documents."""

import json

import pytest


def _document(**overrides):
    document = {
        "tone": "Passive-Aggressive",
        "score": 7,
        "explanation": "The period after 'k' signals irritation.",
        "confidence": 85,
        "replies": [
            {"type": "Confident", "msg": "Let's talk about it."},
            {"type": "Calm", "msg": "Everything okay?"},
            {"type": "Witty", "msg": "That period hit different."},
        ],
    }
    document.update(overrides)
    return document


def _envelope(text, finish_reason="STOP"):
    return {
        "candidates": [
            {
                "content": {"parts": [{"text": text}], "role": "model"},
                "finishReason": finish_reason,
            }
        ]
    }


@pytest.fixture
def make_document():
    """Build a valid analysis document, overriding selected fields."""
    return _document


@pytest.fixture
def make_envelope():
    """Wrap generated text in a generateContent envelope."""
    return _envelope


@pytest.fixture
def valid_envelope():
    return _envelope(json.dumps(_document()))
