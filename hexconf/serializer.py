"""Output writers for a resolved environment."""

import xml.etree.ElementTree as ET

import yaml

from hexconf.values import ConstRef, Dict, Number, to_python

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>\n'


def build_value(parent, value):
    if isinstance(value, Number):
        ET.SubElement(parent, "number").text = str(value.value)
    elif isinstance(value, Dict):
        elem = ET.SubElement(parent, "dict")
        for name, v in value.fields.items():
            build_value(ET.SubElement(elem, "entry", name=name), v)
    elif isinstance(value, ConstRef):
        raise TypeError(f"Cannot serialize unresolved constant reference: {value.name}")
    else:
        raise TypeError(f"Cannot serialize value of type {type(value).__name__}")


def to_xml(resolved, root_name="config"):
    root = ET.Element(root_name)
    for name, value in resolved.items():
        build_value(ET.SubElement(root, name), value)
    ET.indent(root, space="  ")
    body = ET.tostring(root, encoding="unicode", short_empty_elements=False)
    return XML_DECLARATION + body + "\n"


def to_yaml(resolved):
    data = {name: to_python(value) for name, value in resolved.items()}
    return yaml.dump(data, allow_unicode=True, sort_keys=False, default_flow_style=False)


FORMATS = {
    "xml": to_xml,
    "yaml": to_yaml,
}
