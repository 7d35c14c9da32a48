CURRENT_SCHEMA_VERSION = 3

DEFAULT_DOCUMENT_NAME = "solo-remote-config"

MIGRATION_USER = "system"

COMMON_FLAGS = [
    "release_tag",
    "chart_directory",
    "relay_release_tag",
    "solo_chart_version",
    "mirror_node_version",
    "node_aliases_unparsed",
    "explorer_version",
]
