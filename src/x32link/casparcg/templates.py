"""
Writes HTML template files beneath the playout server's template folder.
"""
import logging
import os
import re

logger = logging.getLogger(__name__)

_drive = re.compile(r'^[A-Za-z]:')


class TemplateError(Exception):
    """ A template path was rejected or the file could not be written. """


def validate_relative_path(path) -> str:
    """
    Checks that a template path stays beneath the template root.
    Backslashes are treated as separators.
    >>> validate_relative_path(' lower\\\\third.html ')
    'lower/third.html'
    :return: the normalized path
    :raises TemplateError: if the path is empty, absolute, names a drive or refers to a parent directory
    """
    normalized = path.strip().replace('\\', '/')
    if not normalized:
        raise TemplateError("Template file name is required")
    if normalized.startswith('/') or _drive.match(normalized) or '..' in normalized.split('/'):
        raise TemplateError("Template file path must be relative to template root")
    return normalized


def write_template_file(root, relative_path, content) -> str:
    """
    Writes content to relative_path beneath root, creating directories as needed.
    :param content: str content is written as utf-8
    :return: a message naming the file written
    """
    root = root.strip()
    if not root:
        raise TemplateError("Template root path is required")
    target = os.path.join(root, *validate_relative_path(relative_path).split('/'))
    if isinstance(content, str):
        content = content.encode('utf-8')
    try:
        os.makedirs(os.path.dirname(target), exist_ok=True)
        with open(target, 'wb') as f:
            f.write(content)
    except OSError as e:
        raise TemplateError(str(e)) from e
    logger.info("wrote template %s" % target)
    return "Wrote %s" % target
