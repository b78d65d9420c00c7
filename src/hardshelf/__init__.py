# ABOUTME: hardshelf - a resilient client for the Hardcover book catalog.
# ABOUTME: See hardshelf.catalog for lookups and shelves, hardshelf.core for bulk sync.
