"""Application-level constants."""

# Taxonomy service endpoints (relative to the configured base URL)
VERSION_PATH = "/version/public/"
TREE_PATH = "/tree/public/"
ATTRIBUTE_BY_ID_PATH = "/attributes/public/byID/{internal_id}"
FIRST_LEVEL_VALUES_PATH = "/attributes/public/showFirstLevelValues"
CHILD_VALUES_PATH = "/listofvalue/public/childrenLov/{value_id}"
ATTRIBUTES_BY_IDS_PATH = "/attributes/public/byIDs"

# Query parameter / body keys
TAXONOMY_ID_PARAM = "taxonomyId"
ATTRIBUTES_LIST_PARAM = "attributesList"
ATTRIBUTE_IDENTIFIERS_KEY = "attributeIdentifiers"

# Payload keys
VALUES_MAP_KEY = "map"
CHILD_VALUES_KEY = "list"
