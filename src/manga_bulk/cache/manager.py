"""Local snapshot of the remote group list, with fuzzy search."""

import html
import json
import logging
import re
from pathlib import Path

from pydantic import ValidationError

from manga_bulk.core.similarity import compare_two_strings
from manga_bulk.core.storage import write_text_atomic
from manga_bulk.errors import GroupCacheMissingError, InputError
from manga_bulk.models.group import GroupMatch, GroupRecord, group_list_adapter

log = logging.getLogger(__name__)

# Group picker on the upload page; an empty data-subtext marks an open group
GROUP_OPTION_PATTERN = re.compile(
    r"<option data-subtext='(|[^<]+)' value='([0-9]+)'>([^<]+)<",
    re.IGNORECASE,
)


def parse_group_listing(page: str) -> list[GroupRecord]:
    """Extract groups from the upload page, first occurrence of each id wins."""
    groups: list[GroupRecord] = []
    seen: set[int] = set()
    for subtext, raw_id, name in GROUP_OPTION_PATTERN.findall(page):
        group_id = int(raw_id)
        if group_id in seen:
            continue
        seen.add(group_id)
        groups.append(
            GroupRecord(id=group_id, name=html.unescape(name), is_open=subtext == "")
        )
    return groups


class GroupCacheManager:
    """Reads and replaces the group cache file."""

    MIN_SCORE = 0.4
    MAX_RESULTS = 10

    def __init__(self, cache_path: Path):
        self.cache_path = cache_path

    def exists(self) -> bool:
        return self.cache_path.exists()

    def save(self, groups: list[GroupRecord]) -> None:
        """Replace the cache wholesale."""
        data = [g.model_dump(by_alias=True) for g in groups]
        write_text_atomic(self.cache_path, json.dumps(data, ensure_ascii=False))

    def update_from_listing(self, page: str) -> list[GroupRecord]:
        """Parse a fetched upload page and replace the cache with its groups."""
        groups = parse_group_listing(page)
        self.save(groups)
        log.info("Group cache updated with %d groups", len(groups))
        return groups

    def load(self) -> list[GroupRecord]:
        """Load every cached group.

        Raises:
            GroupCacheMissingError: If no cache has been built yet
            InputError: If the cache file is unreadable or corrupt
        """
        if not self.exists():
            raise GroupCacheMissingError(str(self.cache_path))
        try:
            return group_list_adapter.validate_json(self.cache_path.read_bytes())
        except OSError as e:
            raise InputError(f"Could not read group cache {self.cache_path}: {e}") from e
        except ValidationError as e:
            raise InputError(
                f"Group cache {self.cache_path} is broken, run 'group update' again"
            ) from e

    def search(self, term: str) -> list[GroupMatch]:
        """Best matching open groups, highest score first."""
        matches = []
        for group in self.load():
            if not group.is_open:
                continue
            score = compare_two_strings(group.name, term)
            if score >= self.MIN_SCORE:
                matches.append(GroupMatch(group=group, score=score))

        matches.sort(key=lambda m: m.score, reverse=True)
        return matches[: self.MAX_RESULTS]
