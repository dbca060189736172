"""Command-line tools for semsearch.

- ``python -m semsearch.cli index`` -- run one indexing pass, print stats
- ``python -m semsearch.cli query TEXT`` -- index, then stream results
- ``python -m semsearch.cli chunk FILE`` -- preview chunk boundaries offline

The same commands are installed as the ``semsearch`` console script.
Heavy imports (embedding providers, the service graph) are deferred inside
functions so that ``chunk`` and ``--help`` start quickly.
"""
