"""Tests for breed label localization."""

from __future__ import annotations

import pytest

from breedlens.ml.labels import BREED_NAMES, localize


class TestLocalize:
    def test_mapped_label(self) -> None:
        assert localize("golden_retriever") == "金毛獵犬"

    def test_imagenet_style_label(self) -> None:
        assert localize("golden retriever") == "金毛獵犬"
        assert localize("Shih-Tzu") == "西施犬"

    def test_synonym_list_uses_first_match(self) -> None:
        assert localize("Maltese dog, Maltese terrier, Maltese") == "瑪爾濟斯犬"
        assert localize("Eskimo dog, husky") == "愛斯基摩犬"

    def test_later_synonym_matches(self) -> None:
        assert localize("Alaskan husky, malamute") == "阿拉斯加雪橇犬"

    @pytest.mark.parametrize("label", ["tabby, tabby cat", "sports car", "not_a_dog", "ÄÖÜ"])
    def test_unmapped_label_returned_unchanged(self, label: str) -> None:
        assert localize(label) == label

    def test_every_table_key_maps_to_non_empty_name(self) -> None:
        for key, name in BREED_NAMES.items():
            assert localize(key) == name
            assert name

    def test_table_covers_imagenet_dog_classes(self) -> None:
        assert len(BREED_NAMES) == 118
