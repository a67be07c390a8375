import sys

import requests

def get_file_by_url(url, params=None, **kwargs):
    """
    Parameters are passed to the requests.get() function.

    Parameters
    ----------
    url : str or bytes
        URL for the new Request object.
    params :
        Dictionary, list of tuples or bytes to send in the query string for the Request.
    kwargs :
        Optional arguments that request takes. ``timeout`` defaults to 10 seconds.

    Returns
    -------
    url_data : str or None
        The text retrieved at that URL. Returns None if the
        attempted retrieval is unsuccessful.
    """

    kwargs.setdefault("timeout", 10)
    try:
        req = requests.get(url=url, params=params, **kwargs)
        req.raise_for_status()
    except requests.exceptions.RequestException as e:
        sys.stderr.write("Error retrieving data from {}: {}\n".format(url, e))
        return None

    req.encoding = req.encoding or req.apparent_encoding
    return req.text
