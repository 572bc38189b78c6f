from __future__ import annotations

import pytest

from cpr_backend.features.geninfo.graph_converter import classify_graph
from cpr_backend.features.geninfo.leaf_collector import collect_text_leaves, is_text_leaf


def test_leaf_filter_drops_short_and_weight_files():
    graph = classify_graph({
        "1": {"class_type": "CheckpointLoaderSimple", "inputs": {"ckpt_name": "model.safetensors"}},
        "2": {"class_type": "CLIPTextEncode", "inputs": {"text": "a valid prompt string", "mode": "ok"}},
        "3": {"class_type": "CLIPTextEncode", "inputs": {"text": "a valid prompt string"}},
    })
    leaves = collect_text_leaves(graph)
    assert leaves == ("a valid prompt string",)
    assert leaves.count("a valid prompt string") == 1


@pytest.mark.parametrize(
    "value, expected",
    [
        ("abcd", True),
        ("abc", False),
        ("   abc   ", False),
        ("LORA.SafeTensors", False),
        ("vae.pt", False),
        ("unet.gguf", False),
        ("weights.bin.txt", True),
        (12345, False),
        (None, False),
    ],
)
def test_is_text_leaf(value, expected):
    assert is_text_leaf(value) is expected


def test_widget_values_are_collected_in_order(ui_workflow):
    ui_workflow["nodes"].append({"id": 3, "type": "Note", "widgets_values": {"text": "a note for later"}})
    graph = classify_graph(ui_workflow)
    assert collect_text_leaves(graph) == ("a watercolor harbor", "a note for later")


def test_min_length_override():
    graph = classify_graph({"1": {"class_type": "X", "inputs": {"a": "ab", "b": "abcdef"}}})
    assert collect_text_leaves(graph, min_length=2) == ("ab", "abcdef")
    assert collect_text_leaves(graph, min_length=10) == ()


def test_leaves_are_stripped_before_dedupe():
    graph = classify_graph({
        "1": {"class_type": "X", "inputs": {"text": " sunset "}},
        "2": {"class_type": "X", "inputs": {"text": "sunset"}},
    })
    assert collect_text_leaves(graph) == ("sunset",)
