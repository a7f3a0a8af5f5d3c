"""Refresh the bundled list of external-identifier properties from Wikidata."""

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List

import backoff
from SPARQLWrapper import JSON, SPARQLWrapper
from SPARQLWrapper.SPARQLExceptions import SPARQLWrapperException

from wikidata_filter.tables import DATA_DIR, IDENTIFIER_PROPERTIES_FILE

logger = logging.getLogger(__name__)

PROPERTY_PREFIX = "http://www.wikidata.org/entity/P"

IDENTIFIER_PROPERTIES_QUERY = """PREFIX wikibase: <http://wikiba.se/ontology#>
SELECT ?property WHERE {
  ?property wikibase:propertyType wikibase:ExternalId .
}"""


@backoff.on_exception(
    backoff.expo,
    (SPARQLWrapperException, OSError),
    max_tries=5,
    max_time=300,
)
def query_wikidata(sparql_client: SPARQLWrapper, query: str) -> Dict[str, Any]:
    """Perform the SPARQL query with retries using exponential backoff."""
    sparql_client.setQuery(query)
    sparql_client.setReturnFormat(JSON)
    return sparql_client.query().convert()


def property_ids(results: Dict[str, Any]) -> List[int]:
    """Numeric ids of the property IRIs in a SPARQL JSON result, sorted and unique."""
    ids = set()
    for binding in results.get("results", {}).get("bindings", []):
        value = binding.get("property", {}).get("value", "").strip()
        if not value.startswith(PROPERTY_PREFIX):
            continue
        try:
            ids.add(int(value[len(PROPERTY_PREFIX) :]))
        except ValueError:
            logger.warning("Ignoring unexpected property IRI %s", value)
    return sorted(ids)


def write_ids(ids: Iterable[int], path: Path) -> None:
    with open(path, "w", encoding="utf-8") as f:
        for pid in ids:
            f.write(f"{pid}\n")


def fetch_identifier_properties(
    endpoint: str,
    user_agent: str,
    output: Path = DATA_DIR / IDENTIFIER_PROPERTIES_FILE,
) -> List[int]:
    sparql = SPARQLWrapper(endpoint)
    sparql.addCustomHttpHeader("User-Agent", user_agent)
    results = query_wikidata(sparql, IDENTIFIER_PROPERTIES_QUERY)
    ids = property_ids(results)
    write_ids(ids, Path(output))
    logger.info("Wrote %d identifier properties to %s", len(ids), output)
    return ids
