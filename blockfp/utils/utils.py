# (c) Jordi Cortadella 2022
# For the FRAME Project.
# Licensed under the MIT License
# (see https://github.com/jordicf/FRAME/blob/master/LICENSE.txt).

"""
Some common utils to read/write files and handle identifiers and numbers
"""

import json
import numbers
import pathlib
import re
from typing import Any, Optional

import yaml

Python_object = object


def valid_identifier(ident: Any) -> bool:
    """
    Checks whether the argument is a string and is a valid identifier.
    The first character must be a letter or '_'.
    The remaining characters can also be digits
    :param ident: identifier.
    :return: True if valid, and False otherwise.
    """
    if not isinstance(ident, str):
        return False
    _valid_id = "^[A-Za-z_][A-Za-z0-9_]*"
    return re.fullmatch(_valid_id, ident) is not None


def is_number(n: Any) -> bool:
    """
    Checks whether a value is a number (int or float). Booleans are not numbers.
    :param n: the number.
    :return: True if it is a number, False otherwise.
    """
    return isinstance(n, numbers.Real) and not isinstance(n, bool)


def string_is_number(s: str) -> bool:
    """
    Checks whether a string represents a number.
    :param s: the string.
    :return: True if it represents a number, False otherwise.
    """
    try:
        float(s)
        return True
    except ValueError:
        return False


def single_line_string(s: str) -> bool:
    """Checks whether the string has one line only.

    Args:
        s (str): input string

    Returns:
        bool: True if it has only one line, False otherwise
    """
    return s.count("\n") == 0


def read_json_yaml_file(filename: str) -> Python_object:
    """
    Reads a JSON or YAML file. It raises an exception in case an error is
    produced. The type of the file is determined by the suffix of the
    filename (.yaml or .yml for YAML and .json for JSON).
    :param filename: the input file.
    :return: the Python object
    """
    fname = pathlib.Path(filename)
    suffix = fname.suffix

    if suffix == ".json":
        with open(fname, "r") as f:
            return json.load(f)

    if suffix in [".yaml", ".yml"]:
        with open(fname, "r") as f:
            return yaml.safe_load(f)

    raise NameError(f"Unknown suffix for file {fname}")


def read_json_yaml_text(text: str, is_json: bool = False) -> Python_object:
    """
    Reads a JSON or YAML text. It raises an exception in case an error is
    produced.
    :param text: the input text
    :param is_json: indicates whether the text is in JSON (True) or YAML (False)
    :return: the Python object
    """
    return json.loads(text) if is_json else yaml.safe_load(text)


def read_json_yaml(stream: str) -> Python_object:
    """
    Reads a JSON/YAML file or a YAML text. A single-line string is taken as a
    file name, anything else as YAML contents.
    :param stream: name of the file or YAML text
    :return: the Python object
    """
    if single_line_string(stream):
        return read_json_yaml_file(stream)
    return read_json_yaml_text(stream)


def write_json_yaml(
    data: Any, is_json: bool = True, filename: Optional[str] = None
) -> Optional[str]:
    """
    Writes the data into a JSON or YAML file. If no file name is given,
    a string with the yaml contents is returned
    :param data: data to be written
    :param is_json: True if a JSON file is to be generated, otherwise YAML
    :param filename: name of the output file
    :return: the JSON/YAML string in case filename is None
    """

    if filename is None:  # generate an output string
        if is_json:
            return json.dumps(data)
        return yaml.dump(data, default_flow_style=None, sort_keys=False)

    with open(filename, "w") as stream:  # dump into a file
        if is_json:
            json.dump(data, stream, indent=2)
        else:
            yaml.dump(data, stream, default_flow_style=None, indent=4, sort_keys=False)
        return None


def write_by_suffix(data: Any, filename: str) -> None:
    """
    Writes the data into a JSON or YAML file, choosing the format from the suffix
    :param data: data to be written
    :param filename: name of the output file (.json, .yaml or .yml)
    """
    suffix = pathlib.Path(filename).suffix
    if suffix == ".json":
        write_json_yaml(data, True, filename)
    elif suffix in [".yaml", ".yml"]:
        write_json_yaml(data, False, filename)
    else:
        raise NameError(f"Unknown suffix for {filename}: .json, .yaml or .yml expected")
