"""Naming helpers shared by the JDL parser and the relationship normalizer."""

DEFAULT_MODEL_SUFFIX = 'Model'


def lc_first(value: str) -> str:
    """Lower-case the first character: 'OrderLine' -> 'orderLine'."""
    return value[:1].lower() + value[1:] if value else value


def pluralize(word: str) -> str:
    """Naive pluralization: append 's' unless the word already ends in 's'.

    'category' becomes 'categorys'. Field names are only defaults, an
    explicit field name in the relationship declaration always wins.
    """
    if not word:
        return word
    return word if word.endswith('s') else word + 's'


def default_field_name(entity_name: str, collection: bool) -> str:
    """Field name used when a relationship declaration names no field."""
    name = lc_first(entity_name)
    return pluralize(name) if collection else name


def model_class_name(entity_name: str, suffix: str = DEFAULT_MODEL_SUFFIX) -> str:
    """Class name of the emitted model for an entity: 'Car' -> 'CarModel'."""
    return f"{entity_name}{suffix}"
