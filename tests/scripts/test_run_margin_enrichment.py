#!/usr/bin/env python3
"""
Test suite for run_margin_enrichment.py script.
Runs the command line entry point against temporary event and document files.
"""

import json
import os
from pathlib import Path

import pytest
from run_margin_enrichment import build_margin_config, build_parser, build_settings, main

from item_enrichment import EnrichmentSettings


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep ITEM_ENRICHMENT_* and DOCUMENT_STORE_* variables out of the runs."""
    for name in list(os.environ):
        if name.startswith(("ITEM_ENRICHMENT_", "DOCUMENT_STORE_")):
            monkeypatch.delenv(name)


@pytest.fixture
def event_file(tmp_path: Path) -> Path:
    event = {
        "event_name": "purchase",
        "items": [
            {"item_id": "sku-1", "quantity": 3},
            {"item_name": "gift wrap"},
            {"item_id": "sku-404", "quantity": 1},
            {"item_id": "sku-2", "quantity": 4, "discount": 5},
        ],
    }
    path = tmp_path / "event.json"
    path.write_text(json.dumps(event), encoding="utf-8")
    return path


@pytest.fixture
def documents_file(tmp_path: Path) -> Path:
    documents = {
        "products/sku-1": {"price": 10},
        "products/sku-2": {"price": 50},
    }
    path = tmp_path / "documents.json"
    path.write_text(json.dumps(documents), encoding="utf-8")
    return path


class TestMain:
    @pytest.mark.asyncio
    async def test_prints_enriched_items(self, event_file, documents_file, capsys):
        status = await main(
            [
                "--event", str(event_file),
                "--documents", str(documents_file),
                "--collection", "products",
                "--value-field", "price",
            ]
        )

        assert status == 0
        items = json.loads(capsys.readouterr().out)
        assert [item.get("margin") for item in items] == [30, None, None, 200]
        assert items[1] == {"item_name": "gift wrap"}

    @pytest.mark.asyncio
    async def test_writes_output_file(self, event_file, documents_file, tmp_path):
        output = tmp_path / "out.json"

        status = await main(
            [
                "--event", str(event_file),
                "--documents", str(documents_file),
                "--collection", "products",
                "--value-field", "price",
                "--value-calculation", "valueWithDiscount",
                "--output", str(output),
            ]
        )

        assert status == 0
        items = json.loads(output.read_text(encoding="utf-8"))
        assert items[0]["margin"] == 30
        assert items[3]["margin"] == 180

    @pytest.mark.asyncio
    async def test_missing_collection_is_a_configuration_error(self, event_file, documents_file, capsys):
        status = await main(
            ["--event", str(event_file), "--documents", str(documents_file), "--value-field", "price"]
        )

        assert status == 2
        assert "Invalid margin configuration" in capsys.readouterr().err

    @pytest.mark.asyncio
    async def test_strict_formula(self, event_file, documents_file, capsys):
        status = await main(
            [
                "--event", str(event_file),
                "--documents", str(documents_file),
                "--collection", "products",
                "--value-field", "price",
                "--value-calculation", "bogus",
                "--strict-formula",
            ]
        )

        assert status == 2
        assert "bogus" in capsys.readouterr().err

    @pytest.mark.asyncio
    async def test_bad_payload(self, tmp_path, documents_file, capsys):
        event = tmp_path / "event.json"
        event.write_text(json.dumps({"items": "sku-1"}), encoding="utf-8")

        status = await main(
            [
                "--event", str(event),
                "--documents", str(documents_file),
                "--collection", "products",
                "--value-field", "price",
            ]
        )

        assert status == 2
        assert "must be a list" in capsys.readouterr().err

    @pytest.mark.asyncio
    async def test_invalid_store_environment_is_a_configuration_error(
        self, event_file, capsys, monkeypatch
    ):
        monkeypatch.setenv("DOCUMENT_STORE_PROVIDER", "redis")

        status = await main(
            [
                "--event", str(event_file),
                "--collection", "products",
                "--value-field", "price",
            ]
        )

        assert status == 2
        assert "Invalid document store configuration" in capsys.readouterr().err

    @pytest.mark.asyncio
    async def test_missing_event_file_exits(self, tmp_path, documents_file):
        with pytest.raises(SystemExit) as exc_info:
            await main(
                [
                    "--event", str(tmp_path / "missing.json"),
                    "--documents", str(documents_file),
                    "--collection", "products",
                    "--value-field", "price",
                ]
            )
        assert exc_info.value.code == 1


class TestBuilders:
    def test_margin_config_falls_back_to_settings(self):
        args = build_parser().parse_args(["--event", "e.json"])
        settings = EnrichmentSettings(
            collection_id="catalog", value_field="cost", value_calculation="returnRate",
            return_rate_field="rr",
        )

        config = build_margin_config(args, settings)

        assert config.collection_id == "catalog"
        assert config.value_field == "cost"
        assert config.return_rate_field == "rr"
        assert config.value_calculation == "returnRate"

    def test_settings_overrides(self):
        args = build_parser().parse_args(
            ["--event", "e.json", "--namespace", "shop", "--strict-formula"]
        )

        settings = build_settings(args)

        assert settings.namespace == "shop"
        assert settings.strict_formula is True
