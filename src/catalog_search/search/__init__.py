"""
In-memory search indexing and query engine package.

This package provides a pure-Python search stack:
- analyzers: Tokenizer and filters (trimming, stopwords, stemming)
- fuzzy: Edit-distance term matching
- index: Immutable per-type inverted index
- registry: Named index registry with atomic replacement
- translator: Request -> query plan translation (exact/prefix/fuzzy boosts)
- cursor: Opaque page cursor codec
- engine: Search engine facade
- errors: Indexing and query errors
"""
