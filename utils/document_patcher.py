#!/usr/bin/env python3
"""Marker-delimited section patching for changelog and README files.

A section looks like:

	<!-- RELEASE-GENIE:changelog-START -->
	...generated content...
	<!-- RELEASE-GENIE:changelog-END -->

Only the marked span is rewritten; every byte outside it is preserved.
"""
from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Optional, Tuple

from configs.config import Config

logger = logging.getLogger(__name__)


def section_markers(section_id: str, namespace: Optional[str] = None) -> Tuple[str, str]:
	ns = namespace or Config.MARKER_NAMESPACE
	return f"<!-- {ns}:{section_id}-START -->", f"<!-- {ns}:{section_id}-END -->"


def _find_section(document: str, section_id: str, namespace: Optional[str]) -> Optional[re.Match]:
	start, end = section_markers(section_id, namespace)
	# Exactly one pair, start before end. Anything else is left alone.
	if document.count(start) != 1 or document.count(end) != 1:
		return None
	pattern = re.compile(re.escape(start) + r"(?P<body>.*?)" + re.escape(end), re.DOTALL)
	return pattern.search(document)


def extract_section(document: str, section_id: str, namespace: Optional[str] = None) -> Optional[str]:
	"""Return the trimmed contents of the section, or None if its markers are not usable."""
	match = _find_section(document, section_id, namespace)
	if match is None:
		return None
	return match.group("body").strip()


def replace_between_markers(document: str, section_id: str, new_block: str, namespace: Optional[str] = None) -> str:
	"""Replace the marked span with `start + newline + trimmed block + newline + end`.

	Missing, duplicated or out-of-order markers log a warning and return the
	document unchanged. The new block is spliced in by offset, so its content is
	never interpreted as a replacement pattern.
	"""
	match = _find_section(document, section_id, namespace)
	if match is None:
		logger.warning(f"Markers for section {section_id} not found. Skipping replace.")
		return document
	start, end = section_markers(section_id, namespace)
	replacement = f"{start}\n{new_block.strip()}\n{end}"
	return document[:match.start()] + replacement + document[match.end():]


def _drop_leading_entry(section: str, tag: str) -> str:
	"""Remove a leading `### <tag>` entry, up to the next `### ` heading."""
	lines = section.split("\n")
	if not lines or lines[0].strip() != f"### {tag}":
		return section
	rest = lines[1:]
	for i, line in enumerate(rest):
		if line.startswith("### "):
			return "\n".join(rest[i:])
	return ""


def compose_changelog_section(tag: str, new_block: str, previous_section: Optional[str]) -> str:
	"""Prepend the new release above the previous section contents.

	When the section already starts with an entry for the same tag (a re-run),
	that entry is replaced rather than stacked.
	"""
	previous = _drop_leading_entry(previous_section or "", tag)
	return f"### {tag}\n\n{new_block}\n\n{previous}".strip()


def read_document(path: str) -> Optional[str]:
	p = Path(path)
	if not p.is_file():
		logger.warning(f"File not found: {path}")
		return None
	with open(p, "r", encoding="utf-8", newline="") as f:
		return f.read()


def write_document(path: str, original: str, updated: str) -> bool:
	"""Write `updated` when it differs from `original`. Returns True if written."""
	if updated == original:
		logger.info(f"No changes for {path}")
		return False
	# newline="" keeps the document's own line endings
	with open(path, "w", encoding="utf-8", newline="") as f:
		f.write(updated)
	return True
