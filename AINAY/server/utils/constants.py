from __future__ import annotations

from os.path import abspath, join
from types import MappingProxyType

# [PATHS]
###############################################################################
ROOT_DIR = abspath(join(__file__, "../../../.."))
PROJECT_DIR = join(ROOT_DIR, "AINAY")
SETTING_PATH = join(PROJECT_DIR, "setup", "settings")
RSC_PATH = join(PROJECT_DIR, "resources")
DATA_PATH = join(RSC_PATH, "database")
SOURCES_PATH = join(DATA_PATH, "sources")
LOGS_PATH = join(RSC_PATH, "logs")

###############################################################################
SERVER_CONFIGURATION_FILE = join(SETTING_PATH, "server_configurations.json")
FOOD_INTERACTIONS_FILENAME = "drug_food_interactions.json"
DRUG_INTERACTIONS_FILENAME = "drug_drug_interactions.json"

# [DATA SERIALIZATION]
###############################################################################
FOOD_INTERACTION_COLUMNS = ["name", "reference", "food_interactions"]
DRUG_INTERACTION_COLUMNS = [
    "interaction_id",
    "drug_a",
    "drug_b",
    "severity",
    "mechanism",
    "clinical_effect",
    "safer_alternative",
]

# [DATASET FETCHING]
###############################################################################
RETRY_STATUS = frozenset({429, 500, 502, 503, 504})
BACKOFF_TIME = (0.6, 1.2, 2.4)

# [NAME MATCHING]
###############################################################################
DOSAGE_UNITS = (
    "mg",
    "mcg",
    "ml",
    "g",
    "iu",
    "units?",
    "tablets?",
    "caps?",
    "capsules?",
)
SALT_FORMS = (
    "sodium",
    "potassium",
    "calcium",
    "hydrochloride",
    "hcl",
    "sulfate",
    "sulphate",
    "phosphate",
    "acetate",
    "citrate",
    "maleate",
    "fumarate",
    "tartrate",
    "besylate",
    "mesylate",
    "succinate",
    "lactate",
    "bromide",
    "chloride",
    "nitrate",
    "oxide",
)
FRAGMENT_MIN_LENGTH = 3
SECONDARY_WORD_MIN_LENGTH = 4
SIGNIFICANT_WORD_MIN_LENGTH = 4

# Brand name -> generic names, matched in both directions.
DRUG_ALIASES: MappingProxyType[str, tuple[str, ...]] = MappingProxyType(
    {
        "tylenol": ("acetaminophen", "paracetamol"),
        "advil": ("ibuprofen",),
        "motrin": ("ibuprofen",),
        "aleve": ("naproxen",),
        "lipitor": ("atorvastatin",),
        "zocor": ("simvastatin",),
        "crestor": ("rosuvastatin",),
        "coumadin": ("warfarin",),
        "glucophage": ("metformin",),
        "zestril": ("lisinopril",),
        "prinivil": ("lisinopril",),
        "norvasc": ("amlodipine",),
        "lasix": ("furosemide",),
        "synthroid": ("levothyroxine",),
        "plavix": ("clopidogrel",),
        "xanax": ("alprazolam",),
        "valium": ("diazepam",),
        "ambien": ("zolpidem",),
        "prozac": ("fluoxetine",),
        "zoloft": ("sertraline",),
        "lexapro": ("escitalopram",),
        "prilosec": ("omeprazole",),
        "nexium": ("esomeprazole",),
        "lantus": ("insulin glargine",),
        "humalog": ("insulin lispro",),
        "novolog": ("insulin aspart",),
    }
)

# [DRUG-DRUG INTERACTIONS]
###############################################################################
SEVERITY_ORDER: MappingProxyType[str, int] = MappingProxyType(
    {"Major": 0, "Moderate": 1, "Minor": 2}
)

# [PROMPT CONTEXT]
###############################################################################
FOOD_CONTEXT_HEADING = "## Drug-to-Food Interaction Warnings"
FOOD_CONTEXT_PREAMBLE = (
    "IMPORTANT: The following food and dietary interactions apply to the "
    "user's medications:"
)
FOOD_CONTEXT_CLOSING = (
    "When discussing these medications or diet/nutrition topics, proactively "
    "inform the user about relevant food interactions. Data source: "
    "Drug-Food Interactions Dataset (Kaggle)."
)
