# ABOUTME: biblioenrich - bibliographic enrichment pipeline for scraped book collections.
# ABOUTME: Queries bulk, per-record, and catalog sources and merges their answers into each record.
