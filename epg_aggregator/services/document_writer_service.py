from pathlib import Path
import logging

from lxml import etree # type: ignore

from epg_aggregator.exceptions import PersistError
from epg_aggregator.services.fetch_types import EPGDocument
from epg_aggregator.utils.file_operations import atomic_write_bytes
from epg_aggregator.utils.timezone import format_xmltv_time

logger = logging.getLogger(__name__)


def serialize_document(document: EPGDocument, time_format: str) -> bytes:
    """
    Serialize an EPG document to XMLTV

    Args:
        document: Frozen aggregation result
        time_format: strftime format used for every start/stop attribute

    Returns:
        UTF-8 encoded XML with declaration; elements in insertion order
    """
    root = etree.Element('tv')

    for channel in document.channels:
        channel_elem = etree.SubElement(root, 'channel', id=channel.id)
        _add_text(channel_elem, 'display-name', channel.display_name)

    for record in document.programmes:
        programme = etree.SubElement(root, 'programme')
        programme.set('channel', record.channel_id)
        programme.set('start', format_xmltv_time(record.start, time_format))
        programme.set('stop', format_xmltv_time(record.end, time_format))
        _add_text(programme, 'title', record.title)
        _add_text(programme, 'desc', record.description)

    logger.debug(f"Serialized {len(document.channels)} channels and {len(document.programmes)} programmes")

    return etree.tostring(root, xml_declaration=True, encoding='UTF-8', pretty_print=True)


async def write_document(document: EPGDocument, destination: Path | str, time_format: str) -> Path:
    """
    Serialize and atomically persist an EPG document

    Args:
        document: Frozen aggregation result
        destination: Final output path
        time_format: strftime format for programme timestamps

    Returns:
        The destination path

    Raises:
        PersistError: If serialization, write or rename fails; the previous
            file at destination is left untouched
    """
    try:
        data = serialize_document(document, time_format)
    except (ValueError, TypeError) as e:
        # lxml rejects control characters and other non-XML text
        logger.error(f"Failed to serialize EPG document: {e}")
        raise PersistError(str(destination), e) from e

    return await atomic_write_bytes(destination, data)


def _add_text(parent: etree._Element, tag: str, text: str) -> etree._Element:
    """Append a child element with text content"""
    child = etree.SubElement(parent, tag)
    child.text = text
    return child
