"""courtlistener_mcp.mcp.tools

Tool registry: each tool is a pydantic argument model, a builder that maps
validated arguments to an API path + query parameters, and a formatter.
``run_tool`` is transport-agnostic and shared by the MCP server and the REST
surface.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated, Any, Callable, Optional

from pydantic import BaseModel, Field, StringConstraints, ValidationError, model_validator

from courtlistener_mcp.core.fetcher import CourtListenerClient
from courtlistener_mcp.mcp import formatters
from courtlistener_mcp.models.results import Fetched, FetchResult
from courtlistener_mcp.utils.logger import get_logger

logger = get_logger(__name__)


MAX_RESULTS_LIMIT = 100
MIN_RESULTS_LIMIT = 1

CourtId = Annotated[str, StringConstraints(pattern=r"^[a-z0-9]+$", max_length=50)]
IsoDate = Annotated[str, StringConstraints(pattern=r"^\d{4}-\d{2}-\d{2}$")]
ResourceId = Annotated[int, Field(ge=1)]


class UnknownToolError(ValueError):
    pass


class ToolArgumentError(ValueError):
    """Invalid tool arguments; the message names fields, never values."""

    def __init__(self, tool_name: str, fields: list[str]):
        self.tool_name = tool_name
        self.fields = fields
        joined = ", ".join(fields) if fields else "arguments"
        super().__init__(f"Invalid arguments for {tool_name}: {joined}")


class ToolArgs(BaseModel):
    auth_token: Optional[str] = Field(
        default=None,
        description="CourtListener API authentication token (optional)",
    )


def _limit(default: int) -> Any:
    return Field(
        default=default,
        ge=MIN_RESULTS_LIMIT,
        le=MAX_RESULTS_LIMIT,
        description=f"Number of results to return (max {MAX_RESULTS_LIMIT})",
    )


# ---------------------------------------------------------------------------
# Argument models
# ---------------------------------------------------------------------------


class SearchDocketsArgs(ToolArgs):
    q: Optional[str] = Field(default=None, max_length=1000, description="Search query text")
    docket_number: Optional[str] = Field(
        default=None, max_length=100, description="Specific docket number to search for"
    )
    court: Optional[CourtId] = Field(default=None, description="Court ID (e.g., 'scotus', 'ca9', 'nysd')")
    case_name: Optional[str] = Field(default=None, max_length=500, description="Case name to search for")
    date_filed_after: Optional[IsoDate] = Field(
        default=None, description="Find cases filed after this date (YYYY-MM-DD)"
    )
    date_filed_before: Optional[IsoDate] = Field(
        default=None, description="Find cases filed before this date (YYYY-MM-DD)"
    )
    nature_of_suit: Optional[str] = Field(default=None, max_length=200, description="Nature of suit filter")
    limit: int = _limit(10)


class GetDocketArgs(ToolArgs):
    docket_id: ResourceId = Field(description="The ID of the docket to retrieve")


class SearchClustersArgs(ToolArgs):
    q: Optional[str] = Field(default=None, max_length=1000, description="Search query text")
    case_name: Optional[str] = Field(default=None, max_length=500, description="Case name to search for")
    court: Optional[CourtId] = Field(default=None, description="Court ID (e.g., 'scotus', 'ca9')")
    date_filed_after: Optional[IsoDate] = Field(
        default=None, description="Find cases filed after this date (YYYY-MM-DD)"
    )
    date_filed_before: Optional[IsoDate] = Field(
        default=None, description="Find cases filed before this date (YYYY-MM-DD)"
    )
    precedential_status: Optional[str] = Field(
        default=None, max_length=100, description="Precedential status (e.g., 'Published', 'Unpublished')"
    )
    citation: Optional[str] = Field(default=None, max_length=200, description="Citation to search for")
    limit: int = _limit(10)


class GetClusterArgs(ToolArgs):
    cluster_id: ResourceId = Field(description="The ID of the cluster to retrieve")


class SearchOpinionsArgs(ToolArgs):
    q: Optional[str] = Field(default=None, max_length=1000, description="Search query text")
    type: Optional[str] = Field(
        default=None, max_length=100, description="Opinion type (e.g., 'Lead Opinion', 'Concurrence', 'Dissent')"
    )
    author: Optional[str] = Field(default=None, max_length=200, description="Author name or ID")
    court: Optional[CourtId] = Field(default=None, description="Court ID (e.g., 'scotus', 'ca9')")
    date_created_after: Optional[IsoDate] = Field(
        default=None, description="Find opinions created after this date (YYYY-MM-DD)"
    )
    date_created_before: Optional[IsoDate] = Field(
        default=None, description="Find opinions created before this date (YYYY-MM-DD)"
    )
    limit: int = _limit(10)


class GetOpinionArgs(ToolArgs):
    opinion_id: ResourceId = Field(description="The ID of the opinion to retrieve")


class ListCourtsArgs(ToolArgs):
    jurisdiction: Optional[str] = Field(
        default=None, max_length=20, description="Filter by jurisdiction (e.g., 'F' for Federal, 'S' for State)"
    )
    in_use: Optional[bool] = Field(default=None, description="Filter to only courts currently in use")
    has_opinion_scraper: Optional[bool] = Field(default=None, description="Filter to courts with opinion scrapers")
    limit: int = _limit(20)


class GetCourtArgs(ToolArgs):
    court_id: CourtId = Field(description="The ID of the court to retrieve (e.g., 'scotus', 'ca9', 'nysd')")


class SearchDocketEntriesArgs(ToolArgs):
    docket_id: ResourceId = Field(description="The ID of the docket to search entries for")
    q: Optional[str] = Field(default=None, max_length=1000, description="Search query text within docket entries")
    entry_number: Optional[int] = Field(default=None, ge=0, description="Specific entry number to search for")
    date_filed_after: Optional[IsoDate] = Field(
        default=None, description="Find entries filed after this date (YYYY-MM-DD)"
    )
    date_filed_before: Optional[IsoDate] = Field(
        default=None, description="Find entries filed before this date (YYYY-MM-DD)"
    )
    description: Optional[str] = Field(default=None, max_length=500, description="Search in entry descriptions")
    limit: int = _limit(20)


class GetDocketEntryArgs(ToolArgs):
    entry_id: ResourceId = Field(description="The ID of the docket entry to retrieve")


class SearchPartiesArgs(ToolArgs):
    docket_id: ResourceId = Field(description="The ID of the docket to search parties for")
    name: Optional[str] = Field(default=None, max_length=500, description="Search for parties by name")
    party_type: Optional[str] = Field(
        default=None, max_length=100, description="Filter by party type (e.g., 'Plaintiff', 'Defendant')"
    )
    limit: int = _limit(20)


class GetPartyArgs(ToolArgs):
    party_id: ResourceId = Field(description="The ID of the party to retrieve")


class SearchAttorneysArgs(ToolArgs):
    docket_id: ResourceId = Field(description="The ID of the docket to search attorneys for")
    name: Optional[str] = Field(default=None, max_length=500, description="Search for attorneys by name")
    limit: int = _limit(20)


class GetAttorneyArgs(ToolArgs):
    attorney_id: ResourceId = Field(description="The ID of the attorney to retrieve")


class SearchRecapDocumentsArgs(ToolArgs):
    docket_entry_id: ResourceId = Field(description="The ID of the docket entry to search documents for")
    document_type: Optional[str] = Field(default=None, max_length=100, description="Filter by document type")
    document_number: Optional[int] = Field(default=None, ge=0, description="Specific document number")
    is_available: Optional[bool] = Field(default=None, description="Filter by document availability")
    is_free_on_pacer: Optional[bool] = Field(default=None, description="Filter by free availability on PACER")
    limit: int = _limit(20)


class GetRecapDocumentArgs(ToolArgs):
    document_id: ResourceId = Field(description="The ID of the RECAP document to retrieve")


class RecapQueryArgs(ToolArgs):
    court: CourtId = Field(description="Court ID (e.g., 'ca9', 'nysd')")
    pacer_case_id: Optional[str] = Field(default=None, max_length=100, description="PACER case ID")
    docket_number: Optional[str] = Field(
        default=None, max_length=100, description="Docket number (alternative to pacer_case_id)"
    )
    document_number: int = Field(ge=0, description="Document number to retrieve")
    attachment_number: Optional[int] = Field(
        default=None, ge=0, description="Attachment number (if looking for attachment)"
    )

    @model_validator(mode="after")
    def _require_case_reference(self) -> "RecapQueryArgs":
        if not self.pacer_case_id and not self.docket_number:
            raise ValueError("Either pacer_case_id or docket_number must be provided")
        return self


# ---------------------------------------------------------------------------
# Request builders
# ---------------------------------------------------------------------------


def _search_dockets(args: SearchDocketsArgs) -> tuple[str, dict[str, Any]]:
    return "/dockets/", {
        "q": args.q,
        "docket_number": args.docket_number,
        "court": args.court,
        "case_name": args.case_name,
        "date_filed__gte": args.date_filed_after,
        "date_filed__lte": args.date_filed_before,
        "nature_of_suit": args.nature_of_suit,
        "page_size": args.limit,
    }


def _search_clusters(args: SearchClustersArgs) -> tuple[str, dict[str, Any]]:
    return "/clusters/", {
        "q": args.q,
        "case_name": args.case_name,
        "docket__court": args.court,
        "date_filed__gte": args.date_filed_after,
        "date_filed__lte": args.date_filed_before,
        "precedential_status": args.precedential_status,
        "citation": args.citation,
        "page_size": args.limit,
    }


def _search_opinions(args: SearchOpinionsArgs) -> tuple[str, dict[str, Any]]:
    return "/opinions/", {
        "q": args.q,
        "type": args.type,
        "author_str": args.author,
        "cluster__docket__court": args.court,
        "date_created__gte": args.date_created_after,
        "date_created__lte": args.date_created_before,
        "page_size": args.limit,
    }


def _list_courts(args: ListCourtsArgs) -> tuple[str, dict[str, Any]]:
    return "/courts/", {
        "jurisdiction": args.jurisdiction,
        "in_use": args.in_use,
        "has_opinion_scraper": args.has_opinion_scraper,
        "page_size": args.limit,
    }


def _search_docket_entries(args: SearchDocketEntriesArgs) -> tuple[str, dict[str, Any]]:
    return "/docket-entries/", {
        "docket": args.docket_id,
        "q": args.q,
        "entry_number": args.entry_number or None,
        "date_filed__gte": args.date_filed_after,
        "date_filed__lte": args.date_filed_before,
        "description__icontains": args.description,
        "page_size": args.limit,
    }


def _search_parties(args: SearchPartiesArgs) -> tuple[str, dict[str, Any]]:
    return "/parties/", {
        "docket": args.docket_id,
        "name__icontains": args.name,
        "party_types__name": args.party_type,
        "page_size": args.limit,
    }


def _search_attorneys(args: SearchAttorneysArgs) -> tuple[str, dict[str, Any]]:
    return "/attorneys/", {
        "docket": args.docket_id,
        "name__icontains": args.name,
        "page_size": args.limit,
    }


def _search_recap_documents(args: SearchRecapDocumentsArgs) -> tuple[str, dict[str, Any]]:
    return "/recap-documents/", {
        "docket_entry": args.docket_entry_id,
        "document_type": args.document_type,
        "document_number": args.document_number or None,
        "is_available": args.is_available,
        "is_free_on_pacer": args.is_free_on_pacer,
        "page_size": args.limit,
    }


def _recap_query(args: RecapQueryArgs) -> tuple[str, dict[str, Any]]:
    params: dict[str, Any] = {
        "court": args.court,
        "document_number": args.document_number,
    }
    # pacer_case_id wins when both are given
    if args.pacer_case_id:
        params["pacer_case_id"] = args.pacer_case_id
    else:
        params["docket_number"] = args.docket_number
    if args.attachment_number:
        params["attachment_number"] = args.attachment_number
    return "/recap-query/", params


def _detail(collection: str, id_field: str) -> Callable[[Any], tuple[str, dict[str, Any]]]:
    def build(args: Any) -> tuple[str, dict[str, Any]]:
        return f"/{collection}/{getattr(args, id_field)}/", {}

    return build


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ToolSpec:
    name: str
    description: str
    arguments: type[ToolArgs]
    build_request: Callable[[Any], tuple[str, dict[str, Any]]]
    formatter: Callable[..., str]
    # List tools: plural noun, e.g. "dockets"
    noun: str = ""
    # Detail tools: singular label and the argument holding the id
    label: str = ""
    id_field: Optional[str] = None
    title: str = ""
    scope_field: Optional[str] = None
    scope_label: str = ""
    failure_text: Optional[str] = None
    empty_text: Optional[str] = None
    # Formatter takes a preview length (opinion bodies)
    preview: bool = False

    @property
    def is_list(self) -> bool:
        return self.id_field is None and bool(self.noun)

    def input_schema(self) -> dict[str, Any]:
        return self.arguments.model_json_schema()

    def parse(self, arguments: Optional[dict[str, Any]]) -> ToolArgs:
        try:
            return self.arguments.model_validate(arguments or {})
        except ValidationError as e:
            fields = sorted(
                {".".join(str(part) for part in err["loc"]) or "arguments" for err in e.errors()}
            )
            raise ToolArgumentError(self.name, fields) from None

    def _scope(self, args: ToolArgs) -> str:
        if not self.scope_field:
            return ""
        return f" for {self.scope_label} {getattr(args, self.scope_field)}"

    def failure_message(self, args: ToolArgs) -> str:
        if self.failure_text:
            return self.failure_text
        if self.id_field:
            return f"Failed to retrieve {self.label} {getattr(args, self.id_field)} from CourtListener API"
        return f"Failed to retrieve {self.noun} from CourtListener API"

    def empty_message(self, args: ToolArgs) -> str:
        if self.empty_text:
            return self.empty_text
        if self.scope_field:
            return f"No {self.noun} found{self._scope(args)}"
        return f"No {self.noun} found matching the search criteria"

    def render(self, result: Fetched, args: ToolArgs, formatter: Callable[[dict[str, Any]], str]) -> str:
        if not self.is_list:
            return f"{self.title}:\n\n{formatter(result.data)}"

        items = [item for item in result.results if isinstance(item, dict)]
        if not items:
            return self.empty_message(args)

        blocks = "\n".join(formatter(item) for item in items)
        return (
            f"Found {result.count} {self.noun}{self._scope(args)} "
            f"(showing {len(items)}):\n\n{blocks}"
        )


TOOLS: dict[str, ToolSpec] = {
    spec.name: spec
    for spec in [
        ToolSpec(
            name="search-dockets",
            description="Search for court dockets using various filters",
            arguments=SearchDocketsArgs,
            build_request=_search_dockets,
            formatter=formatters.format_docket,
            noun="dockets",
        ),
        ToolSpec(
            name="get-docket",
            description="Get detailed information about a specific docket by ID",
            arguments=GetDocketArgs,
            build_request=_detail("dockets", "docket_id"),
            formatter=formatters.format_docket,
            label="docket",
            id_field="docket_id",
            title="Docket Details",
        ),
        ToolSpec(
            name="search-clusters",
            description="Search for opinion clusters (groups of related opinions)",
            arguments=SearchClustersArgs,
            build_request=_search_clusters,
            formatter=formatters.format_cluster,
            noun="opinion clusters",
        ),
        ToolSpec(
            name="get-cluster",
            description="Get detailed information about a specific opinion cluster by ID",
            arguments=GetClusterArgs,
            build_request=_detail("clusters", "cluster_id"),
            formatter=formatters.format_cluster,
            label="cluster",
            id_field="cluster_id",
            title="Opinion Cluster Details",
        ),
        ToolSpec(
            name="search-opinions",
            description="Search for individual court opinions",
            arguments=SearchOpinionsArgs,
            build_request=_search_opinions,
            formatter=formatters.format_opinion,
            preview=True,
            noun="opinions",
        ),
        ToolSpec(
            name="get-opinion",
            description="Get detailed information about a specific opinion by ID",
            arguments=GetOpinionArgs,
            build_request=_detail("opinions", "opinion_id"),
            formatter=formatters.format_opinion,
            preview=True,
            label="opinion",
            id_field="opinion_id",
            title="Opinion Details",
        ),
        ToolSpec(
            name="list-courts",
            description="Get a list of available courts",
            arguments=ListCourtsArgs,
            build_request=_list_courts,
            formatter=formatters.format_court,
            noun="courts",
            empty_text="No courts found matching the criteria",
        ),
        ToolSpec(
            name="get-court",
            description="Get detailed information about a specific court by ID",
            arguments=GetCourtArgs,
            build_request=_detail("courts", "court_id"),
            formatter=formatters.format_court,
            label="court",
            id_field="court_id",
            title="Court Details",
        ),
        ToolSpec(
            name="search-docket-entries",
            description="Search for docket entries within a specific docket",
            arguments=SearchDocketEntriesArgs,
            build_request=_search_docket_entries,
            formatter=formatters.format_docket_entry,
            noun="docket entries",
            scope_field="docket_id",
            scope_label="docket",
        ),
        ToolSpec(
            name="get-docket-entry",
            description="Get detailed information about a specific docket entry by ID",
            arguments=GetDocketEntryArgs,
            build_request=_detail("docket-entries", "entry_id"),
            formatter=formatters.format_docket_entry,
            label="docket entry",
            id_field="entry_id",
            title="Docket Entry Details",
        ),
        ToolSpec(
            name="search-parties",
            description="Search for parties within a specific docket",
            arguments=SearchPartiesArgs,
            build_request=_search_parties,
            formatter=formatters.format_party,
            noun="parties",
            scope_field="docket_id",
            scope_label="docket",
        ),
        ToolSpec(
            name="get-party",
            description="Get detailed information about a specific party by ID",
            arguments=GetPartyArgs,
            build_request=_detail("parties", "party_id"),
            formatter=formatters.format_party,
            label="party",
            id_field="party_id",
            title="Party Details",
        ),
        ToolSpec(
            name="search-attorneys",
            description="Search for attorneys within a specific docket",
            arguments=SearchAttorneysArgs,
            build_request=_search_attorneys,
            formatter=formatters.format_attorney,
            noun="attorneys",
            scope_field="docket_id",
            scope_label="docket",
        ),
        ToolSpec(
            name="get-attorney",
            description="Get detailed information about a specific attorney by ID",
            arguments=GetAttorneyArgs,
            build_request=_detail("attorneys", "attorney_id"),
            formatter=formatters.format_attorney,
            label="attorney",
            id_field="attorney_id",
            title="Attorney Details",
        ),
        ToolSpec(
            name="search-recap-documents",
            description="Search for RECAP documents within a specific docket entry",
            arguments=SearchRecapDocumentsArgs,
            build_request=_search_recap_documents,
            formatter=formatters.format_recap_document,
            noun="RECAP documents",
            scope_field="docket_entry_id",
            scope_label="docket entry",
        ),
        ToolSpec(
            name="get-recap-document",
            description="Get detailed information about a specific RECAP document by ID",
            arguments=GetRecapDocumentArgs,
            build_request=_detail("recap-documents", "document_id"),
            formatter=formatters.format_recap_document,
            label="RECAP document",
            id_field="document_id",
            title="RECAP Document Details",
        ),
        ToolSpec(
            name="recap-query",
            description="Fast document lookup by court, case number, and document number",
            arguments=RecapQueryArgs,
            build_request=_recap_query,
            formatter=formatters.format_recap_document,
            label="document",
            title="RECAP Document (Fast Lookup)",
            failure_text="Failed to retrieve document via recap-query",
        ),
    ]
}


def get_tool(name: str) -> ToolSpec:
    spec = TOOLS.get(name)
    if spec is None:
        raise UnknownToolError(f"Unknown tool: {name}")
    return spec


async def run_tool(
    name: str,
    arguments: Optional[dict[str, Any]],
    client: CourtListenerClient,
    *,
    site_url: str = formatters.DEFAULT_SITE_URL,
    preview_length: int = formatters.DEFAULT_PREVIEW_LENGTH,
) -> str:
    """
    Validate arguments, call CourtListener once and render the result as text.

    Raises:
        UnknownToolError: ``name`` is not registered
        ToolArgumentError: arguments fail validation
    """
    spec = get_tool(name)
    args = spec.parse(arguments)
    path, params = spec.build_request(args)

    result: FetchResult = await client.fetch(path, params, args.auth_token)
    if not isinstance(result, Fetched):
        logger.info(f"Tool {name} returned no data")
        return spec.failure_message(args)

    def formatter(item: dict[str, Any]) -> str:
        if spec.preview:
            return spec.formatter(item, site_url, preview_length)
        return spec.formatter(item, site_url)

    return spec.render(result, args, formatter)
