"""Shared test fixtures."""

import pytest

from model_search.models.item import Item, parse_item

RAW_RESULTS = [
    {
        "model_id": "meta-llama/Llama-2-7b-hf",
        "tags": ["text-generation", "transformers", "license:llama2", "pytorch"],
        "downloads": 5000,
        "distance": 0.30,
        "model_explanation_gemini": "A **7B** chat model.",
    },
    {
        "model_id": "meta-llama/Llama-2-13b-hf",
        "tags": ["text-generation", "pytorch", "arxiv:2307.09288"],
        "downloads": 3000,
        "distance": 0.20,
    },
    {
        "model_id": "bert-base-uncased",
        "tags": ["fill-mask", "pytorch", "en"],
        "downloads": 90000,
        "distance": 0.55,
    },
    {
        "model_id": "openai/whisper",
        "tags": ["automatic-speech-recognition", "dataset:librispeech"],
        "downloads": 120,
        "distance": 0.70,
    },
    {
        "model_id": "meta-llama/Llama-2-70b-hf",
        "tags": ["text-generation", "safetensors"],
        "downloads": 800,
        "distance": 0.45,
    },
]


@pytest.fixture
def raw_items() -> list[Item]:
    """Five parsed items: three Llama-2 sizes, BERT and Whisper."""
    return [parse_item(raw) for raw in RAW_RESULTS]
