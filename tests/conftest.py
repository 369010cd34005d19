import json
from datetime import date

import pytest
from app import create_app
from services.waste.parse import build_rule_store


# Monday of ISO week 3 (odd) in 2026.
TODAY = date(2026, 1, 12)


@pytest.fixture
def ruleset_payload():
    """Small ruleset covering every rule kind."""
    return {
        "platnost": "od 1. 1. 2026 do 31. 12. 2026",
        "oblasti": [
            {
                "nazev": "Mimo sídliště",
                "typy_odpadu": [
                    {
                        "typ": "Směsný komunální odpad (SKO)",
                        "frekvence": "Sudé týdny",
                        "rozpis_dle_dnu": {
                            "Utery": ["Hlavní", "Myslivecká"],
                            "Streda": ["Polní"],
                        },
                    },
                    {
                        "typ": "Plast",
                        "frekvence": "Liché týdny",
                        "rozpis_dle_dnu": "Stejný rozpis jako SKO",
                    },
                    {
                        "typ": "Papír",
                        "frekvence": "Vybrané týdny (5, 9)",
                        "rozpis_dle_dnu": "Stejný rozpis jako SKO",
                    },
                    {
                        "typ": "Sklo",
                        "poznamka": "Jen čisté sklo",
                        "skupiny": [
                            {"svozovy_den": "Pátek", "tydny": [4, 8], "ulice": ["Hlavní"]},
                        ],
                    },
                ],
            },
            {
                "nazev": "Sídliště",
                "pravidlo": "Každé pondělí",
                "ulice": ["Husova", "Nerudova"],
            },
            {
                "nazev": "Výjimky",
                "cisla_popisna": [1710, 512],
                "popis": "Individuální svoz",
            },
        ],
    }


@pytest.fixture
def rule_store(ruleset_payload):
    return build_rule_store(ruleset_payload)


@pytest.fixture
def ruleset_file(tmp_path, ruleset_payload):
    path = tmp_path / "waste.json"
    path.write_text(json.dumps({"rozpis_svozu_odpadu": ruleset_payload}, ensure_ascii=False), encoding="utf-8")
    return path


@pytest.fixture
def app(ruleset_file, mocker):
    """Testing app over the small ruleset, with 'today' pinned."""
    mocker.patch("app.routes.main.local_today", return_value=TODAY)
    app = create_app('Testing', overrides={"WASTE_DATA_PATH": str(ruleset_file)})
    with app.app_context():
        yield app


@pytest.fixture
def client(app):
    return app.test_client()
