COLLABORATIONS_INDEX = ".opensearch-collaborations"

# Index settings for the collaborations system index
COLLABORATIONS_SETTINGS = {
    "index": {
        "number_of_shards": 1,
        "auto_expand_replicas": "0-2",  # Grow replicas with the cluster, up to 2
        "hidden": True,
    }
}

# Mapping for collaboration documents; the payload object is keyed by its type tag
COLLABORATIONS_MAPPING = {
    "dynamic": "false",  # Keep unknown fields in _source without indexing them
    "properties": {
        "lastUpdatedTimeMs": {"type": "date", "format": "epoch_millis"},
        "createdTimeMs": {"type": "date", "format": "epoch_millis"},
        "tenant": {"type": "keyword"},
        "access": {"type": "keyword"},

        "collaboration": {
            "type": "object",
            "properties": {
                "type": {"type": "keyword"},
                "pageId": {"type": "keyword"},
                "paragraphId": {"type": "keyword"},
                "lineId": {"type": "keyword"},
                # Free text tags with keyword subfield for exact filtering
                "tags": {
                    "type": "text",
                    "fields": {
                        "keyword": {"type": "keyword", "ignore_above": 256}
                    }
                },
                "resolved": {"type": "boolean"},
            }
        },
    }
}


def build_create_index_body() -> dict:
    return {"settings": COLLABORATIONS_SETTINGS, "mappings": COLLABORATIONS_MAPPING}
