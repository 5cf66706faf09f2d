"""Jira search collaborator.

Issues are read with paged POSTs to ``/rest/api/2/search``. Failures are fatal and never
retried: a partial ticket list would make every report section wrong.
"""

from __future__ import annotations

import logging
from urllib.parse import quote

import requests

from ticketmatch_core.exceptions import InvalidTicketDataError, TrackerError
from ticketmatch_core.models import TicketRecord

logger = logging.getLogger(__name__)

_SEARCH_PATH = "/rest/api/2/search"


def build_jql(project: str, fix_version: str) -> str:
    return f'project = {project} AND fixVersion = "{fix_version}" ORDER BY key'


def tickets_url(base_url: str, keys: list[str]) -> str:
    """Link to a Jira issue search showing exactly ``keys``."""
    jql = f"key in ({','.join(keys)})"
    return f"{base_url.rstrip('/')}/issues/?jql={quote(jql)}"


def _option_text(value) -> str | None:
    """Flatten a Jira custom field value (string, option object or list of them)."""
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, dict):
        return value.get("value") or value.get("name")
    if isinstance(value, list):
        parts = [p for p in (_option_text(v) for v in value) if p]
        return ", ".join(parts) or None
    return str(value)


def _option_names(value) -> tuple[str, ...]:
    """Every name held by a single- or multi-select custom field."""
    if isinstance(value, list):
        return tuple(name for v in value for name in _option_names(v))
    name = _option_text(value)
    return (name,) if name else ()


def parse_issue(issue: dict, config: dict) -> TicketRecord:
    """Build a TicketRecord from one entry of the search response's ``issues``.

    Raises InvalidTicketDataError if the key or status name is missing.
    """
    key = issue.get("key") if isinstance(issue, dict) else None
    fields = issue.get("fields") if isinstance(issue, dict) else None
    if not key or not isinstance(fields, dict):
        raise InvalidTicketDataError(f"Jira issue without key or fields: {issue!r}")

    status = fields.get("status") or {}
    state = status.get("name") if isinstance(status, dict) else None
    if not state:
        raise InvalidTicketDataError(f"Jira issue {key} has no status name")

    issue_type = fields.get("issuetype") or {}
    return TicketRecord(
        key=key,
        state=state,
        issue_type=(issue_type.get("name") if isinstance(issue_type, dict) else None) or "",
        teams=_option_names(fields.get(config.get("team_field"))),
        release_note=_option_text(fields.get(config.get("release_note_field"))),
    )


def _post_page(url: str, payload: dict, auth, timeout) -> dict:
    try:
        response = requests.post(url, json=payload, auth=auth, timeout=timeout)
        response.raise_for_status()
        data = response.json()
    except requests.exceptions.RequestException as e:
        raise TrackerError(f"Unable to obtain list of issues from Jira: {e}") from e
    except ValueError as e:
        raise TrackerError(f"Jira returned a response that is not JSON: {e}") from e
    if not isinstance(data, dict):
        raise TrackerError(f"Unexpected Jira search response: {data!r}")
    return data


def search_tickets(config: dict, project: str, fix_version: str) -> list[TicketRecord]:
    """Return every ticket in ``project`` whose fixVersion is ``fix_version``.

    Jira caps the page size whatever ``maxResults`` asks for, so pages are
    fetched with ``startAt`` until ``total`` issues have arrived. An empty
    result is not an error. Raises TrackerError on any transport, HTTP or
    decoding failure, or when the pages stop short of ``total``.
    """
    fields = ["status", "issuetype"]
    fields += [config[name] for name in ("team_field", "release_note_field") if config.get(name)]
    jql = build_jql(project, fix_version)

    auth = None
    if config.get("jira_user") and config.get("jira_token"):
        auth = (config["jira_user"], config["jira_token"])

    url = config["jira_url"].rstrip("/") + _SEARCH_PATH
    issues: list[dict] = []
    while True:
        payload = {"jql": jql, "startAt": len(issues), "maxResults": -1, "fields": fields}
        logger.debug("POST %s startAt=%d jql=%s", url, payload["startAt"], jql)
        data = _post_page(url, payload, auth, config.get("timeout", 30))

        page = data.get("issues") or []
        issues.extend(page)
        total = data.get("total")
        if not isinstance(total, int) or len(issues) >= total:
            break
        if not page:
            raise TrackerError(f"Jira stopped returning issues after {len(issues)} of {total}")

    return [parse_issue(issue, config) for issue in issues]
