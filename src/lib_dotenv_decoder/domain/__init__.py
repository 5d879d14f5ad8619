"""Domain layer: error taxonomy, schema description, and width-annotated scalars."""
