"""
A client for the repository's Solr search index.

A :py:class:`SolrClient` holds a single pooled HTTP session to a Solr core; it is safe to share
a client among callers making concurrent read-only queries.  Failures to reach the index or
server-side failures are raised as :py:class:`~irepo.index.IndexServerError`; these are never
retried by this client.
"""
import logging
from collections.abc import Mapping
from typing import List, Iterable

import requests

from . import IndexServerError, IndexClientError
from irepo.base.config import ConfigurationException
from irepo.utils.logging import blab

DEF_TIMEOUT = 30
SELECT_PATH = "select"
UPDATE_PATH = "update"

_log = logging.getLogger("irepo.index.solr")

def terms_filter(field: str, values: Iterable[str]) -> str:
    """
    return a Solr filter query that matches documents whose ``field`` has any of the given values,
    using Solr's ``terms`` query parser (i.e. ``{!terms f=field}v1,v2,...``).
    """
    return "{!terms f=%s}%s" % (field, ",".join(values))

class SolrClient:
    """
    a client class for querying and updating a Solr core
    """

    def __init__(self, baseurl: str, core: str=None, authconfig: Mapping=None,
                 timeout: float=DEF_TIMEOUT, session: requests.Session=None):
        """
        initialize the client
        :param str      baseurl:  the base URL for the Solr service; if ``core`` is not given, this
                                  should be the full URL to the core (e.g. "http://.../solr/hydra").
        :param str         core:  the name of the core to access, appended to ``baseurl``
        :param dict  authconfig:  a dictionary providing credentials for connecting to the service; if
                                  not provided, it will be assumed that authentication is not required.
        :param float    timeout:  the number of seconds to wait for the service before giving up
        :param Session  session:  the HTTP session to use; if not provided, one is created.
        """
        if not baseurl:
            raise ConfigurationException("SolrClient: missing base URL for search index")
        self.baseurl = baseurl.rstrip('/')
        if core:
            self.baseurl += '/' + core.strip('/')
        self.timeout = timeout
        self._session = session or requests.Session()

        self._authkw = {}
        self._authhdr = {}
        self._setup_auth(authconfig)

    def _setup_auth(self, config: Mapping=None):
        self._authkw = {}
        self._authhdr = {}

        if not config or config.get('type', '') is None:
            return      # no authentication required

        authtype = config.get('type', 'userpass')
        if isinstance(authtype, str):
            authtype = authtype.lower()

        if authtype == "none":
            pass

        elif authtype == "userpass":
            self._authkw = { "auth": (config.get('user'), config.get('pass')) }
            if not all(self._authkw["auth"]):
                raise ConfigurationException("SolrClient: authentication type userpass requires both "+
                                             "'user' and 'pass' config parameters")

        elif authtype == "bearer":
            token = config.get("token")
            if not token:
                raise ConfigurationException("SolrClient: authentication type bearer requires "+
                                             "'token' config parameter")
            self._authhdr = { "Authorization": f"Bearer {token}" }

        else:
            raise ConfigurationException("SolrClient: authentication 'type' param value not supported: "+
                                         authtype)

    def select(self, params: Mapping) -> Mapping:
        """
        submit a query to the core's select handler and return the parsed JSON response.
        :param dict params:  the Solr query parameters; a parameter that should appear multiple
                             times (e.g. ``fq``) can be given as a list of values.
        :raises IndexServerError:  if the index could not be reached or failed to respond properly
        :raises IndexClientError:  if the index rejected the query
        """
        params = dict(params)
        params['wt'] = 'json'
        blab(_log, "select: %s", str(params))
        return self._retrieve("get", SELECT_PATH, params=params)

    def add(self, docs: List[Mapping], commit: bool=True) -> Mapping:
        """
        add (or replace) the given documents in the index
        :param list docs:    the index documents to send
        :param bool commit:  if True, request that the documents be committed immediately
        """
        params = { "wt": "json" }
        if commit:
            params['commit'] = "true"
        _log.debug("adding %d document(s) to index", len(docs))
        return self._retrieve("post", UPDATE_PATH, params=params, json=list(docs))

    def _retrieve(self, method, relurl, **kw):
        hdrs = { "Accept": "application/json" }
        hdrs.update(self._authhdr)
        kw.update(self._authkw)
        url = self.baseurl + '/' + relurl

        try:
            resp = getattr(self._session, method)(url, headers=hdrs, timeout=self.timeout, **kw)
        except requests.RequestException as ex:
            raise IndexServerError(relurl, message="Trouble connecting to search index: "+str(ex),
                                   cause=ex)

        if resp.status_code >= 500:
            raise IndexServerError(relurl, resp.status_code, resp.reason)
        elif resp.status_code >= 400:
            raise IndexClientError(relurl, resp.status_code, resp.reason,
                                   message=self._error_message(relurl, resp))
        elif resp.status_code != 200:
            raise IndexServerError(relurl, resp.status_code, resp.reason,
                                   message="Unexpected response from search index: {0} {1}"
                                           .format(resp.status_code, resp.reason))

        try:
            return resp.json()
        except ValueError as ex:
            if resp.text and ("<body" in resp.text or "<BODY" in resp.text):
                raise IndexServerError(relurl, message="HTML returned where JSON "+
                                       "expected (is service URL correct?)", cause=ex)
            raise IndexServerError(relurl, message="Unable to parse response as "+
                                   "JSON (is service URL correct?)", cause=ex)

    def _error_message(self, relurl, resp):
        msg = "search index rejected request to {0}: {1} {2}".format(relurl, resp.status_code,
                                                                      resp.reason)
        try:
            detail = resp.json().get('error', {}).get('msg')
        except (ValueError, AttributeError):
            detail = None
        if detail:
            msg += ": " + detail
        return msg

def create_solr_client(config: Mapping) -> SolrClient:
    """
    create a :py:class:`SolrClient` from a ``solr`` configuration dictionary which supports the
    parameters ``service_endpoint`` (required), ``core``, ``timeout``, and ``auth``.
    """
    if not config or not config.get('service_endpoint'):
        raise ConfigurationException("Missing required config parameter: solr.service_endpoint")
    try:
        timeout = float(config.get('timeout', DEF_TIMEOUT))
    except (TypeError, ValueError) as ex:
        raise ConfigurationException("solr.timeout: not a number: "+str(config.get('timeout')))
    return SolrClient(config['service_endpoint'], config.get('core'), config.get('auth'), timeout)
