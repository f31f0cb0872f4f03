"""Analysis flows: schema-validated prompt declarations executed by the model client."""
