"""Text rendering for CourtListener resources

Each formatter turns one JSON object into a block of labelled lines ending
with ``---``. Missing or null fields render a placeholder.
"""

from __future__ import annotations

from typing import Any

from courtlistener_mcp.core.guard import sanitize_string

DEFAULT_SITE_URL = "https://www.courtlistener.com"
DEFAULT_PREVIEW_LENGTH = 500
RECAP_PREVIEW_LENGTH = 300
SEPARATOR = "---"


def _text(value: Any, default: str = "") -> str:
    if value is None or value == "":
        return default
    return str(value)


def _yes_no(value: Any) -> str:
    return "Yes" if value else "No"


def _count(value: Any) -> int:
    return len(value) if isinstance(value, (list, tuple)) else 0


def _link(site_url: str, absolute_url: Any) -> str:
    return f"{site_url}{_text(absolute_url)}"


def format_docket(docket: dict[str, Any], site_url: str = DEFAULT_SITE_URL) -> str:
    return "\n".join(
        [
            f"**{_text(docket.get('case_name'), 'Unknown Case')}**",
            f"Docket Number: {_text(docket.get('docket_number'), 'N/A')}",
            f"Court: {_text(docket.get('court_id'), 'N/A').upper()}",
            f"Date Filed: {_text(docket.get('date_filed'), 'Unknown')}",
            f"Nature of Suit: {_text(docket.get('nature_of_suit'), 'N/A')}",
            f"Cause: {_text(docket.get('cause'), 'N/A')}",
            f"Jurisdiction: {_text(docket.get('jurisdiction_type'), 'N/A')}",
            f"Clusters: {_count(docket.get('clusters'))}",
            f"URL: {_link(site_url, docket.get('absolute_url'))}",
            SEPARATOR,
        ]
    )


def format_cluster(cluster: dict[str, Any], site_url: str = DEFAULT_SITE_URL) -> str:
    return "\n".join(
        [
            f"**{_text(cluster.get('case_name'), 'Unknown Case')}**",
            f"Date Filed: {_text(cluster.get('date_filed'), 'Unknown')}",
            f"Judges: {_text(cluster.get('judges'), 'Unknown')}",
            f"Federal Citation: {_text(cluster.get('federal_cite_one'), 'N/A')}",
            f"Status: {_text(cluster.get('precedential_status'), 'Unknown')}",
            f"Citations Count: {_text(cluster.get('citation_count'), '0')}",
            f"Summary: {_text(cluster.get('summary'), 'No summary available')}",
            f"Opinions: {_count(cluster.get('sub_opinions'))}",
            f"URL: {_link(site_url, cluster.get('absolute_url'))}",
            SEPARATOR,
        ]
    )


def format_opinion(
    opinion: dict[str, Any],
    site_url: str = DEFAULT_SITE_URL,
    preview_length: int = DEFAULT_PREVIEW_LENGTH,
) -> str:
    """Opinion bodies are HTML; the preview is sanitized before display."""
    text = (
        opinion.get("html_with_citations")
        or opinion.get("html")
        or opinion.get("plain_text")
        or "No text available"
    )
    text = str(text)
    if len(text) > preview_length:
        preview = sanitize_string(text[:preview_length]) + "..."
    else:
        preview = sanitize_string(text)

    return "\n".join(
        [
            f"**Opinion Type: {sanitize_string(_text(opinion.get('type'), 'Unknown'))}**",
            f"Author: {sanitize_string(_text(opinion.get('author_str'), 'Unknown'))}",
            f"Per Curiam: {_yes_no(opinion.get('per_curiam'))}",
            f"Page Count: {_text(opinion.get('page_count') or None, 'Unknown')}",
            f"Preview: {preview}",
            f"URL: {site_url}{sanitize_string(_text(opinion.get('absolute_url')))}",
            SEPARATOR,
        ]
    )


def format_court(court: dict[str, Any], site_url: str = DEFAULT_SITE_URL) -> str:
    return "\n".join(
        [
            f"**{_text(court.get('full_name'), 'Unknown Court')}**",
            f"Short Name: {_text(court.get('short_name'), 'N/A')}",
            f"ID: {_text(court.get('id'), 'N/A')}",
            f"Jurisdiction: {_text(court.get('jurisdiction'), 'N/A')}",
            f"Citation String: {_text(court.get('citation_string'), 'N/A')}",
            f"Has Opinion Scraper: {_yes_no(court.get('has_opinion_scraper'))}",
            f"Has Oral Argument Scraper: {_yes_no(court.get('has_oral_argument_scraper'))}",
            f"URL: {_text(court.get('url'), 'N/A')}",
            f"Notes: {_text(court.get('notes'), 'No notes')}",
            SEPARATOR,
        ]
    )


def format_docket_entry(entry: dict[str, Any], site_url: str = DEFAULT_SITE_URL) -> str:
    tags = entry.get("tags") or []
    return "\n".join(
        [
            f"**Entry #{_text(entry.get('entry_number'), 'N/A')}**",
            f"Date Filed: {_text(entry.get('date_filed'), 'Unknown')}",
            f"Description: {_text(entry.get('description'), 'N/A')}",
            f"Short Description: {_text(entry.get('short_description'), 'N/A')}",
            f"Time Logged: {_text(entry.get('time_logged'), 'N/A')}",
            f"RECAP Sequence: {_text(entry.get('recap_sequence_number') or None, 'N/A')}",
            f"PACER Sequence: {_text(entry.get('pacer_sequence_number') or None, 'N/A')}",
            f"Tags: {', '.join(str(tag) for tag in tags) if tags else 'None'}",
            f"URL: {_link(site_url, entry.get('absolute_url'))}",
            SEPARATOR,
        ]
    )


def format_party(party: dict[str, Any], site_url: str = DEFAULT_SITE_URL) -> str:
    party_types = []
    for party_type in party.get("party_types") or []:
        if not isinstance(party_type, dict):
            continue
        label = _text(party_type.get("name"))
        if party_type.get("extra_info"):
            label += f" ({party_type['extra_info']})"
        if party_type.get("date_terminated"):
            label += f" - Terminated: {party_type['date_terminated']}"
        party_types.append(label)

    return "\n".join(
        [
            f"**{_text(party.get('name'), 'Unknown Party')}**",
            f"Party Types: {', '.join(party_types)}",
            f"Extra Info: {_text(party.get('extra_info'), 'None')}",
            f"Date Terminated: {_text(party.get('date_terminated'), 'Not terminated')}",
            f"Attorneys: {_count(party.get('attorneys'))}",
            f"URL: {_link(site_url, party.get('absolute_url'))}",
            SEPARATOR,
        ]
    )


def format_attorney(attorney: dict[str, Any], site_url: str = DEFAULT_SITE_URL) -> str:
    roles = []
    for role in attorney.get("roles") or []:
        if not isinstance(role, dict):
            continue
        label = _text(role.get("role"))
        if role.get("date_action"):
            label += f" ({role['date_action']})"
        roles.append(label)

    return "\n".join(
        [
            f"**{_text(attorney.get('name'), 'Unknown Attorney')}**",
            f"Contact: {_text(attorney.get('contact_raw'), 'No contact info')}",
            f"Phone: {_text(attorney.get('phone'), 'N/A')}",
            f"Email: {_text(attorney.get('email'), 'N/A')}",
            f"Fax: {_text(attorney.get('fax'), 'N/A')}",
            f"Roles: {', '.join(roles)}",
            f"Parties Represented: {_count(attorney.get('parties_represented'))}",
            f"Date Terminated: {_text(attorney.get('date_terminated'), 'Not terminated')}",
            f"URL: {_link(site_url, attorney.get('absolute_url'))}",
            SEPARATOR,
        ]
    )


def format_recap_document(doc: dict[str, Any], site_url: str = DEFAULT_SITE_URL) -> str:
    plain_text = doc.get("plain_text")
    if plain_text:
        plain_text = str(plain_text)
        if len(plain_text) > RECAP_PREVIEW_LENGTH:
            text_preview = plain_text[:RECAP_PREVIEW_LENGTH] + "..."
        else:
            text_preview = plain_text
    else:
        text_preview = "No text available"

    title = f"Document #{_text(doc.get('document_number') or None, 'N/A')}"
    if doc.get("attachment_number"):
        title += f".{doc['attachment_number']}"

    file_size = doc.get("file_size")
    if isinstance(file_size, (int, float)) and not isinstance(file_size, bool) and file_size:
        size_text = f"{round(file_size / 1024)} KB"
    else:
        size_text = "Unknown"

    return "\n".join(
        [
            f"**{title}**",
            f"Type: {_text(doc.get('document_type'), 'N/A')}",
            f"Description: {_text(doc.get('description'), 'N/A')}",
            f"Available: {_yes_no(doc.get('is_available'))}",
            f"Free on PACER: {_yes_no(doc.get('is_free_on_pacer'))}",
            f"Sealed: {_yes_no(doc.get('is_sealed'))}",
            f"Page Count: {_text(doc.get('page_count') or None, 'Unknown')}",
            f"File Size: {size_text}",
            f"PACER Doc ID: {_text(doc.get('pacer_doc_id'), 'N/A')}",
            f"OCR Status: {_text(doc.get('ocr_status'), 'N/A')}",
            f"Text Preview: {text_preview}",
            f"URL: {_link(site_url, doc.get('absolute_url'))}",
            SEPARATOR,
        ]
    )
