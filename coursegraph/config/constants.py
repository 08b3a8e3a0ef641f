"""
Configuration constants for the course graph pipeline.
All hardcoded values are centralized here for easy maintenance.
"""


class SchemaConfig:
    """Constants describing the requirement schema."""

    # Bump whenever the requirement schema changes; stored records with a
    # different version are reparsed.
    SCHEMA_VERSION = "SFUv1.1"

    GROUP_LOGICS = ("ALL_OF", "ONE_OF", "TWO_OF")
    LEVELS = ("1XX", "2XX", "3XX", "4XX", "LD", "UD")

    # Tree-valued fields of a parsed record, in output order
    REQUIREMENT_FIELDS = (
        "prerequisite",
        "corequisite",
        "recommended_prerequisite",
        "recommended_corequisite",
    )

    # Trees that contribute links and depth to the graph
    GRAPH_FIELDS = ("prerequisite", "corequisite")


class CatalogConfig:
    """Constants for the remote course catalog."""

    OUTLINES_URL = "https://api.sfucourses.com/v1/rest/outlines/all"
    USER_AGENT = "coursegraph/1.0"


class OracleConfig:
    """Constants for the LLM requirement oracle."""

    BASE_URL = "https://openrouter.ai/api/v1"
    DEFAULT_MODEL = "google/gemini-2.5-flash-lite-preview-06-17"
    TEMPERATURE = 0.1
    MAX_COMPLETION_TOKENS = 10000

    # Corrective re-parses allowed after a rejected parse
    MAX_REVISIONS = 1

    # Prefixes of the single-word verdicts the oracle is asked to answer with
    CLEAR_VERDICT = "CLEAR"
    AMBIGUOUS_VERDICT = "AMBIGUOUS"
    VALID_VERDICT = "VALID"
    INVALID_VERDICT = "INVALID"


class GraphConfig:
    """Constants for graph assembly and node sizing."""

    BASE_LINK_VALUE = 1.0
    HIGH_SCHOOL_PREFIX = "HS"

    MIN_NODE_SIZE = 1.0
    MAX_NODE_SIZE = 3.0
    NODE_SIZE_STEP = 0.20


class FileNames:
    """File names inside the data directory."""

    RAW_OUTLINES = "outlines_all.json"
    VITAL_DATA = "vital_data.json"
    PARSED_REQUIREMENTS = "parsed_requirements.json"
    BLACKLIST = "blacklisted.json"
    DEBUG_DIR = "llm_debug"
    DEBUG_SUFFIX = "_debug.json"
    NODES_CSV = "nodes.csv"
    LINKS_CSV = "links.csv"
