#!/usr/bin/env python3

from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path

from packages.fusiondex_core.names.dataset import DatasetError, PokemonDataset, load_pokemon_entries
from packages.fusiondex_core.names.normalize import (
    create_name_variations,
    normalize_for_api,
    normalize_for_sprite,
    strip_form_suffix,
)
from packages.fusiondex_core.names.resolver import (
    EGG_ID,
    FOSSIL_ID,
    build_index,
    is_potential_pokemon_name,
    resolve,
    resolve_with_special_cases,
)

RECORDS = [
    {"id": 1, "name": "Bulbasaur"},
    {"id": 83, "name": "Farfetch'd"},
    {"id": 122, "name": "Mr. Mime"},
    {"id": 155, "name": "Cyndaquil"},
    {"id": 669, "name": "Flabébé"},
]


class NameVariationTests(unittest.TestCase):
    def test_empty_and_non_string_inputs(self) -> None:
        self.assertEqual(create_name_variations(""), [])
        self.assertEqual(create_name_variations(None), [])
        self.assertEqual(create_name_variations(25), [])

    def test_variants_are_ordered_and_unique(self) -> None:
        variants = create_name_variations("Mr. Mime")
        self.assertEqual(variants[0], "Mr. Mime")
        self.assertEqual(len(variants), len(set(variants)))
        self.assertNotIn("", variants)
        for expected in ("mr. mime", "MR. MIME", "mrmime", "Mr Mime", "MrMime"):
            self.assertIn(expected, variants)
        self.assertEqual(variants, create_name_variations("Mr. Mime"))

    def test_gender_symbols_and_diacritics(self) -> None:
        variants = create_name_variations("Nidoran♀")
        for expected in ("NidoranF", "Nidoran-f", "Nidoran", "nidoranf"):
            self.assertIn(expected, variants)
        self.assertIn("Flabebe", create_name_variations("Flabébé"))
        self.assertIn("Farfetchd", create_name_variations("Farfetch’d"))


class NameResolverTests(unittest.TestCase):
    def setUp(self) -> None:
        self.index = build_index(RECORDS)

    def test_every_variant_of_a_name_resolves_to_it(self) -> None:
        for record in RECORDS:
            for variant in create_name_variations(record["name"]):
                self.assertEqual(resolve(variant, self.index), record["id"], variant)

    def test_fuzzy_scraped_spellings(self) -> None:
        self.assertEqual(resolve("  bulbasaur ", self.index), 1)
        self.assertEqual(resolve("MR MIME", self.index), 122)
        self.assertEqual(resolve("Farfetch’d", self.index), 83)
        self.assertEqual(resolve("Flabebe", self.index), 669)

    def test_unknown_names_resolve_to_none(self) -> None:
        self.assertIsNone(resolve("Missingno", self.index))
        self.assertIsNone(resolve("", self.index))
        self.assertIsNone(resolve(None, self.index))

    def test_first_registered_record_keeps_shared_variant(self) -> None:
        index = build_index([{"id": 32, "name": "Nidoran♂"}, {"id": 29, "name": "Nidoran♀"}])
        self.assertEqual(resolve("Nidoran", index), 32)
        self.assertEqual(resolve("Nidoran♀", index), 29)
        self.assertEqual(resolve("Nidoran♂", index), 32)
        self.assertEqual(resolve("NidoranF", index), 29)

        reversed_index = build_index([{"id": 29, "name": "Nidoran♀"}, {"id": 32, "name": "Nidoran♂"}])
        self.assertEqual(resolve("Nidoran", reversed_index), 29)

    def test_gender_and_case_insensitive_lookup(self) -> None:
        index = build_index([{"id": 29, "name": "Nidoran♀"}])
        self.assertEqual(resolve("NIDORAN♀", index), 29)
        self.assertEqual(resolve("nidoranf", index), 29)
        self.assertEqual(resolve("Nidoran", index), 29)
        self.assertEqual(resolve("nidoran-F", index), 29)

    def test_records_without_id_or_name_are_skipped(self) -> None:
        index = build_index([{"id": 7}, {"name": "Squirtle"}, {"id": 4, "name": "Charmander"}])
        self.assertEqual(len(index), 1)
        self.assertIsNone(resolve("Squirtle", index))
        self.assertEqual(index.canonical_name(4), "Charmander")
        self.assertIsNone(index.canonical_name(None))

    def test_special_cases(self) -> None:
        self.assertEqual(resolve_with_special_cases("Egg", self.index), EGG_ID)
        self.assertEqual(resolve_with_special_cases("Cyadaquil", self.index), 155)
        self.assertEqual(resolve_with_special_cases("Fossil Pokemon (Kanto)", self.index), FOSSIL_ID)
        self.assertEqual(resolve_with_special_cases("Oricorio", self.index), 741)
        self.assertEqual(resolve_with_special_cases("Mr. Mime", self.index), 122)
        self.assertIsNone(resolve_with_special_cases("Rare Candy", self.index))
        self.assertIsNone(resolve_with_special_cases("   ", self.index))
        self.assertIsNone(resolve_with_special_cases(None, self.index))

    def test_potential_pokemon_name_filter(self) -> None:
        for text in ("Pikachu", "Mr. Mime", "Porygon-Z"):
            self.assertTrue(is_potential_pokemon_name(text), text)
        for text in ("Lv", "Level 25", "50%", "123", "10-20", "Fire Type", "Pokémon Egg", "x" * 21, None):
            self.assertFalse(is_potential_pokemon_name(text), text)


class NormalizeTests(unittest.TestCase):
    def test_sprite_filenames(self) -> None:
        self.assertEqual(normalize_for_sprite("Mr. Mime"), "mr-mime")
        self.assertEqual(normalize_for_sprite("Nidoran♀"), "nidoran-f")
        self.assertEqual(normalize_for_sprite("Farfetch'd"), "farfetchd")
        self.assertEqual(normalize_for_sprite("Flabébé"), "flabebe")
        self.assertEqual(normalize_for_sprite("Oricorio Pom-Pom Style"), "oricorio-pom-pom")
        self.assertEqual(normalize_for_sprite("Oricorio Baile Style"), "oricorio")
        self.assertEqual(normalize_for_sprite("Giratina Origin Forme"), "giratina-origin")
        self.assertEqual(normalize_for_sprite(""), "")

    def test_api_slugs(self) -> None:
        self.assertEqual(normalize_for_api("Mr. Mime"), "mr-mime")
        self.assertEqual(normalize_for_api("Deoxys"), "deoxys-normal")
        self.assertEqual(normalize_for_api("Pikachu"), "pikachu")
        self.assertEqual(normalize_for_api(None), "")

    def test_strip_form_suffix(self) -> None:
        self.assertEqual(strip_form_suffix("Giratina Origin Forme"), "Giratina")
        self.assertEqual(strip_form_suffix("Lycanroc Midnight Form"), "Lycanroc")
        self.assertEqual(strip_form_suffix("Minior Red Meteor"), "Minior")
        self.assertEqual(strip_form_suffix("Pikachu"), "Pikachu")


class PokemonDatasetTests(unittest.TestCase):
    def setUp(self) -> None:
        self._td = tempfile.TemporaryDirectory()
        self.path = Path(self._td.name) / "pokemon-data.json"

    def tearDown(self) -> None:
        self._td.cleanup()

    def _write(self, payload: object) -> None:
        self.path.write_text(json.dumps(payload, ensure_ascii=False), encoding="utf-8")

    def test_cache_and_clear(self) -> None:
        self._write(
            [
                {"id": 1, "name": "Bulbasaur", "headNamePart": "Bulba", "bodyNamePart": "saur"},
                {"id": 25, "name": "Pikachu"},
            ]
        )
        dataset = PokemonDataset(self.path)
        self.assertEqual(
            dataset.cache_status(),
            {"pokemon_data": False, "name_index": False, "dex_entries": False},
        )

        self.assertEqual(resolve("pikachu", dataset.name_index()), 25)
        self.assertIs(dataset.entries(), dataset.entries())
        dex = dataset.dex_entries()
        self.assertEqual(dex[0], {"id": 1, "name": "Bulbasaur", "headNamePart": "Bulba", "bodyNamePart": "saur"})
        self.assertEqual(dex[1], {"id": 25, "name": "Pikachu"})
        self.assertEqual(
            dataset.cache_status(),
            {"pokemon_data": True, "name_index": True, "dex_entries": True},
        )

        self._write([{"id": 4, "name": "Charmander"}])
        self.assertIsNone(resolve("charmander", dataset.name_index()))
        dataset.clear()
        self.assertFalse(dataset.cache_status()["pokemon_data"])
        self.assertEqual(resolve("charmander", dataset.name_index()), 4)

    def test_load_errors(self) -> None:
        with self.assertRaises(DatasetError):
            load_pokemon_entries(self.path)

        self.path.write_text("{not json", encoding="utf-8")
        with self.assertRaises(DatasetError):
            load_pokemon_entries(self.path)

        self._write({"id": 1, "name": "Bulbasaur"})
        with self.assertRaises(DatasetError):
            load_pokemon_entries(self.path)

        self._write([{"id": 1, "name": "Bulbasaur"}, {"name": "Ivysaur"}])
        with self.assertRaisesRegex(DatasetError, "missing id or name"):
            load_pokemon_entries(self.path)

        for bad_id in ("abc", "25", 2.5, True):
            self._write([{"id": bad_id, "name": "Pikachu"}])
            with self.assertRaisesRegex(DatasetError, "id must be an integer"):
                load_pokemon_entries(self.path)


if __name__ == "__main__":
    unittest.main()
