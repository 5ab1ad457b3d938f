"""Core output dispatchers."""

import json


def pretty_print(data):
    print(json.dumps(data, indent=2, ensure_ascii=False))


def output(data, formatter=None, fmt="json"):
    """Output data in requested format."""
    if fmt == "table" and formatter:
        print(formatter(data))
    else:
        pretty_print(data)


def mutation_response(entity, entity_id, verb="deleted"):
    """Print the confirmation line for a call that returns no body."""
    print(f"{entity} {entity_id} {verb} successfully")
