"""
XML fingerprint database loading and saving

Format:
    <fingerprints>
      <fingerprint pattern="^Apache/(\\d+\\.\\d+)" flags="REG_ICASE">
        <description>Apache HTTP Server</description>
        <example value="Apache/2.4.41">
          <param name="service.version" value="2.4.41"/>
        </example>
        <example filename="banners/apache.txt" encoding="base64"/>
        <param pos="0" name="service.vendor" value="Apache"/>
        <param pos="1" name="service.version"/>
      </fingerprint>
    </fingerprints>
"""
from pathlib import Path
from typing import Dict, Optional, Union
import base64
import re
import xml.etree.ElementTree as StdET

import defusedxml
from defusedxml import ElementTree as ET

from .encoding import decode_base64_bytes
from .exceptions import InvalidFingerprintDataError, XmlParseError
from .fingerprint import Example, Fingerprint, FingerprintDatabase
from .params import ParameterRule
from logger import get_logger
from metrics import fingerprints_loaded
from config import settings

logger = get_logger(__name__)

# Recog regex flag names mapped onto Python re flags
REGEX_FLAGS: Dict[str, int] = {
    "REG_ICASE": re.IGNORECASE,
    "REG_DOT_NEWLINE": re.DOTALL,
    "REG_MULTILINE": re.MULTILINE,
    "REG_LINE_ANCHORS": re.MULTILINE,
}

# Preferred name when writing a flag back out
_FLAG_NAMES = [
    ("REG_ICASE", re.IGNORECASE),
    ("REG_DOT_NEWLINE", re.DOTALL),
    ("REG_MULTILINE", re.MULTILINE),
]

PathLike = Union[str, Path]


def parse_flags(value: Optional[str]) -> int:
    """Translate a "REG_ICASE|REG_MULTILINE" style attribute into re flags"""
    flags = 0
    if not value:
        return flags

    for name in re.split(r"[|,\s]+", value.strip()):
        if not name:
            continue
        if name not in REGEX_FLAGS:
            raise InvalidFingerprintDataError(f"Unknown regex flag: {name}")
        flags |= REGEX_FLAGS[name]
    return flags


def format_flags(flags: int) -> str:
    return "|".join(name for name, flag in _FLAG_NAMES if flags & flag)


def _read_description(element) -> str:
    description = element.get("description")
    if description is not None:
        return description

    child = element.find("description")
    if child is not None and child.text:
        return " ".join(child.text.split())
    return ""


def _parse_example(element, base_dir: Path) -> Example:
    is_base64 = element.get("encoding") == "base64"
    filename = element.get("filename")
    value = element.get("value")

    if filename is not None:
        path = base_dir / filename
        try:
            content = path.read_text(encoding="utf-8")
        except OSError as e:
            raise InvalidFingerprintDataError(
                f"Cannot read example file {path}: {e}", original_error=e
            )
        if is_base64:
            # Validate and normalise multi-line base64 content
            raw = decode_base64_bytes("".join(content.split()))
            content = base64.b64encode(raw).decode("ascii")
        else:
            content = content.strip()
    elif value is not None:
        content = value
    else:
        raise InvalidFingerprintDataError(
            "Example must have either value or filename attribute"
        )

    example = Example(value=content, is_base64=is_base64)
    for param in element.findall("param"):
        name = param.get("name")
        if name is None:
            raise InvalidFingerprintDataError("Example parameter is missing its name")
        example.add_expected(name, param.get("value", ""))
    return example


def _parse_parameter_rule(element) -> ParameterRule:
    name = element.get("name")
    pos = element.get("pos")
    if name is None or pos is None:
        raise InvalidFingerprintDataError(
            f"Parameter requires pos and name attributes (got pos={pos!r}, name={name!r})"
        )
    try:
        position = int(pos)
    except ValueError as e:
        raise InvalidFingerprintDataError(
            f"Parameter '{name}' has non-integer position {pos!r}", original_error=e
        )
    return ParameterRule(position=position, name=name, default_value=element.get("value"))


def _parse_fingerprint(element, base_dir: Path) -> Fingerprint:
    pattern = element.get("pattern")
    if pattern is None:
        raise InvalidFingerprintDataError("Fingerprint is missing its pattern attribute")

    fingerprint = Fingerprint(
        pattern,
        _read_description(element),
        flags=parse_flags(element.get("flags"))
    )

    for example in element.findall("example"):
        fingerprint.add_example(_parse_example(example, base_dir))

    for param in element.findall("param"):
        fingerprint.add_parameter_rule(_parse_parameter_rule(param))

    return fingerprint


def load_fingerprints_from_xml(
    xml_content: str,
    base_dir: Optional[PathLike] = None
) -> FingerprintDatabase:
    """
    Build a fingerprint database from XML text

    Args:
        xml_content: XML document
        base_dir: Directory that example filename attributes are relative to
            (defaults to the working directory)

    Returns:
        Database with fingerprints in document order

    Raises:
        XmlParseError: document is not well-formed or uses forbidden constructs
        InvalidFingerprintDataError: document content is malformed
        PatternCompileError: a fingerprint pattern does not compile
    """
    try:
        root = ET.fromstring(xml_content)
    except (ET.ParseError, defusedxml.DefusedXmlException) as e:
        raise XmlParseError(f"XML parsing error: {e}", original_error=e)

    if root.tag != "fingerprints":
        raise InvalidFingerprintDataError(
            f"Expected <fingerprints> root element, got <{root.tag}>"
        )

    base = Path(base_dir) if base_dir is not None else Path.cwd()
    database = FingerprintDatabase()
    for element in root.findall("fingerprint"):
        database.add(_parse_fingerprint(element, base))

    if settings.enable_metrics:
        fingerprints_loaded.set(len(database))
    logger.info(f"Loaded {len(database)} fingerprints")
    return database


def load_fingerprints_from_file(path: PathLike) -> FingerprintDatabase:
    """
    Load a fingerprint database from an XML file

    Example filenames are resolved relative to the file's directory.
    """
    path = Path(path)
    xml_content = path.read_text(encoding="utf-8")
    logger.debug(f"Read fingerprint database {path}")
    return load_fingerprints_from_xml(xml_content, base_dir=path.parent)


def save_fingerprints_to_xml(database: FingerprintDatabase) -> str:
    """
    Serialise a database back into the XML format it is loaded from

    Descriptions are written as attributes so they reload verbatim;
    newlines inside attribute values are emitted as character references.
    """
    root = StdET.Element("fingerprints")

    for fingerprint in database:
        fp_elem = StdET.SubElement(root, "fingerprint", pattern=fingerprint.pattern)
        if fingerprint.flags:
            fp_elem.set("flags", format_flags(fingerprint.flags))
        fp_elem.set("description", fingerprint.description)

        for example in fingerprint.examples:
            ex_elem = StdET.SubElement(fp_elem, "example", value=example.value)
            if example.is_base64:
                ex_elem.set("encoding", "base64")
            for name, value in example.expected_parameters.items():
                StdET.SubElement(ex_elem, "param", name=name, value=value)

        for rule in fingerprint.parameter_rules:
            param_elem = StdET.SubElement(
                fp_elem, "param", pos=str(rule.position), name=rule.name
            )
            if rule.default_value is not None:
                param_elem.set("value", rule.default_value)

    StdET.indent(root, space="  ")
    return StdET.tostring(root, encoding="unicode") + "\n"


def save_fingerprints_to_file(database: FingerprintDatabase, path: PathLike):
    Path(path).write_text(save_fingerprints_to_xml(database), encoding="utf-8")
    logger.info(f"Saved {len(database)} fingerprints to {path}")
