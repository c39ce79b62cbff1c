import contextlib
import json

import click

__all__ = ["parse_json"]


def parse_json(ctx, param, value):  # noqa: ARG001, PLR0911
    """
    Click callback parsing a JSON object, ``key=value`` pairs, or a primitive.

    :param ctx: Click context
    :param param: Click parameter
    :param value: The raw option value
    :return: Parsed dictionary, primitive, or None when no value was given
    :raises click.BadParameter: When the value looks like JSON but does not parse
    """
    if isinstance(value, dict):
        return value

    if value is None or (isinstance(value, str) and not value.strip()):
        return None

    if "{" not in value and "}" not in value and "=" in value:
        # Treat it as key=value pairs if it doesn't look like JSON.
        result = {}
        for pair in value.split(","):
            if "=" not in pair:
                raise click.BadParameter(
                    f"{param.name} must be a valid JSON string or key=value pairs."
                )
            key, val = pair.split("=", 1)
            result[key.strip()] = _parse_primitive(val.strip())
        return result

    if "{" not in value and "}" not in value:
        return _parse_primitive(value)

    try:
        return json.loads(value)
    except json.JSONDecodeError as err:
        raise click.BadParameter(f"{param.name} must be a valid JSON string.") from err


def _parse_primitive(value: str):
    with contextlib.suppress(json.JSONDecodeError):
        return json.loads(value)

    return value
