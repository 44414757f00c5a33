# Copyright (C) 2020 Jenkins Pipelines Contributors
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
# http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS, WITHOUT
# WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied. See the
# License for the specific language governing permissions and limitations
# under the License.

import logging
import xml.etree.ElementTree as XML

logger = logging.getLogger(__name__)


def convert_mapping_to_xml(parent, data, mapping):
    """Convert mapping to XML

    Each entry of the mapping is ``(optname, xmlname, default)``. The value
    of ``optname`` in data, or the default when data does not provide it,
    becomes the text of a new ``xmlname`` element. Booleans are written the
    way Jenkins reads them.
    """
    for optname, xmlname, val in mapping:
        val = data.get(optname, val)
        if type(val) == bool:
            val = str(val).lower()
        XML.SubElement(parent, xmlname).text = str(val)


def add_text_if(parent, tag, value):
    """Add ``<tag>value</tag>`` to parent only when value is non-empty."""
    if value:
        XML.SubElement(parent, tag).text = str(value)


def get_text(parent, path, default=''):
    """Text of the element at path, or default when it is missing.

    An element that is present but empty reads as ``''``.
    """
    if parent is None:
        return default
    elem = parent.find(path)
    if elem is None:
        return default
    return elem.text or ''


def get_bool(parent, path, default=False):
    if parent is None or parent.find(path) is None:
        return default
    return get_text(parent, path).strip().lower() == 'true'


def get_int(parent, path, default=0):
    text = get_text(parent, path, None)
    if text is None:
        return default
    try:
        return int(text.strip())
    except ValueError:
        logger.debug("Ignoring non numeric value '%s' of <%s>", text, path)
        return default
