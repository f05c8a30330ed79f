"""
Functions for interpreting the facet portion of a Solr response.

Solr (with its default ``json.nl=flat`` setting) returns the counts for a facet field as a flat
list alternating between a field value and its count, e.g. ``["colA", 5, "colB", 3]``.
"""
from collections.abc import Mapping, Sequence
from typing import Dict

from . import MalformedResponse

def pair_facet_counts(flat: Sequence, field: str=None) -> Dict[str, int]:
    """
    convert a flat, alternating value/count list into a dictionary mapping each value to
    its integer count.
    :param list  flat:  the alternating list as returned by Solr
    :param str  field:  the name of the facet field (used in error messages)
    :raises MalformedResponse:  if the list has an odd length or a count is not an integer
    """
    if isinstance(flat, (str, bytes)) or not isinstance(flat, Sequence):
        raise MalformedResponse("facet counts for %s: expected a list, got %s" %
                                (field or "field", type(flat).__name__), field)
    if len(flat) % 2 != 0:
        raise MalformedResponse("facet counts for %s: odd-length value/count list (%d items)" %
                                (field or "field", len(flat)), field)

    out = {}
    for i in range(0, len(flat), 2):
        out[flat[i]] = _to_count(flat[i+1], flat[i], field)
    return out

def _to_count(count, value, field):
    if isinstance(count, bool):
        raise MalformedResponse("facet count for %s=%s: not a number: %s" % (field, value, count), field)
    if isinstance(count, int):
        return count
    if isinstance(count, str):
        try:
            return int(count.strip())
        except ValueError:
            pass
    raise MalformedResponse("facet count for %s=%s: not a number: %s" % (field, value, repr(count)),
                            field)

def facet_field_counts(response: Mapping, field: str) -> Dict[str, int]:
    """
    extract the counts for the given facet field from a full Solr select response
    :raises MalformedResponse:  if the response does not include counts for the field or they
                                are not properly formed
    """
    try:
        flat = response['facet_counts']['facet_fields'][field]
    except (KeyError, TypeError) as ex:
        raise MalformedResponse("response is missing facet counts for "+field, field, ex)
    return pair_facet_counts(flat, field)
