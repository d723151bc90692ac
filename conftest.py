"""
Pytest configuration and shared fixtures: sample model documents and a
catalog directory built from them.
"""
import copy
import json

import pytest


INVERTER_DOCUMENT = {
    "id": 103,
    "group": {
        "name": "inverter",
        "type": "group",
        "label": "Inverter (Three Phase)",
        "desc": "Include this model for three phase inverter monitoring",
        "points": [
            {"name": "ID", "type": "uint16", "size": 1, "value": 103, "mandatory": "M", "static": "S",
             "label": "Model ID", "desc": "Model identifier"},
            {"name": "L", "type": "uint16", "size": 1, "mandatory": "M", "static": "S",
             "label": "Model Length", "desc": "Model length"},
            {"name": "A", "type": "uint16", "size": 1, "sf": "A_SF", "units": "A", "access": "R",
             "mandatory": "M", "label": "Amps", "desc": "AC Current"},
            {"name": "PhVphA", "type": "uint16", "size": 1, "sf": "V_SF", "units": "V", "access": "R",
             "mandatory": "O", "label": "Phase Voltage AN", "desc": "Phase Voltage AN"},
            {"name": "St", "type": "enum16", "size": 1, "mandatory": "M", "label": "Operating State",
             "desc": "Enumerated value.  Operating state",
             "symbols": [{"name": "OFF", "value": 1, "label": "Off"}, {"name": "MPPT", "value": 4}]},
        ],
        "groups": [
            {
                "name": "settings",
                "type": "group",
                "label": "Settings",
                "points": [
                    {"name": "WMax", "type": "uint16", "size": 1, "access": "RW", "units": "W",
                     "label": "Max Power", "desc": "Setting for maximum power output"},
                ],
                "groups": [
                    {"name": "curve", "type": "sync", "count": "NCrv",
                     "points": [{"name": "ActPt", "type": "uint16", "size": 1, "label": "Active Points"}]},
                ],
            },
        ],
    },
}

COMMON_DOCUMENT = {
    "id": 1,
    "group": {
        "name": "common",
        "type": "group",
        "label": "Common",
        "desc": "All SunSpec compliant devices must include this as the first model",
        "points": [
            {"name": "Mn", "type": "string", "size": 16, "mandatory": "M", "label": "Manufacturer"},
        ],
    },
}

METER_DOCUMENT = {
    "id": 201,
    "label": "Meter (Single Phase)",
    "group": {"name": "ac_meter", "type": "group", "points": []},
}

STORAGE_DOCUMENT = {
    "id": 802,
    "group": {"name": "battery", "type": "group", "label": "Battery Base Model", "desc": "Battery Model"},
}


@pytest.fixture
def inverter_document():
    return copy.deepcopy(INVERTER_DOCUMENT)


@pytest.fixture
def catalog_documents():
    """Documents of a small catalog keyed by file name, in a non-sorted order."""
    return {
        "model_802.json": copy.deepcopy(STORAGE_DOCUMENT),
        "model_103.json": copy.deepcopy(INVERTER_DOCUMENT),
        "model_1.json": copy.deepcopy(COMMON_DOCUMENT),
        "model_201.json": copy.deepcopy(METER_DOCUMENT),
    }


@pytest.fixture
def models_dir(tmp_path, catalog_documents):
    """Directory holding the catalog documents plus files that are not model documents."""
    directory = tmp_path / "models"
    directory.mkdir()
    for name, document in catalog_documents.items():
        (directory / name).write_text(json.dumps(document))
    (directory / "README.md").write_text("# models\n")
    (directory / "schema").mkdir()
    return directory
