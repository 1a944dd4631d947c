# src/proofline/observability/names.py

"""Standard metric names for proofline observability.

Use these constants instead of hardcoded strings for consistency
across the codebase.

Note: All duration metrics are in milliseconds by convention.
"""

# ============================================================================
# LLM Metrics
# ============================================================================

# Duration
LLM_COMPLETION_DURATION = "llm_completion_duration"

# Counters
LLM_REQUESTS_TOTAL = "llm_requests_total"

# Counters (token usage - monotonic over time for cost/rate tracking)
LLM_TOKENS_PROMPT = "llm_tokens_prompt"
LLM_TOKENS_COMPLETION = "llm_tokens_completion"
LLM_TOKENS_TOTAL = "llm_tokens_total"


# ============================================================================
# Oracle Metrics
# ============================================================================

# Counters
ORACLE_CHECKS_TOTAL = "oracle_checks_total"
ORACLE_ERRORS_TOTAL = "oracle_errors_total"


# ============================================================================
# Fingerprint Cache Metrics
# ============================================================================

# Counters
CACHE_HITS_TOTAL = "cache_hits_total"
CACHE_MISSES_TOTAL = "cache_misses_total"
CACHE_ERRORS_TOTAL = "cache_errors_total"

# Duration
SQLITE_INSERT_DURATION = "sqlite_insert_duration"
SQLITE_SELECT_DURATION = "sqlite_select_duration"


# ============================================================================
# Rate Gate Metrics
# ============================================================================

# Duration (time spent waiting for a token)
RATE_GATE_WAIT_DURATION = "rate_gate_wait_duration"

# Counters
RATE_GATE_ADMITTED_TOTAL = "rate_gate_admitted_total"

# Gauges
RATE_GATE_TOKENS = "rate_gate_tokens"


# ============================================================================
# Analysis Metrics
# ============================================================================

# Duration
SEGMENTATION_DURATION = "segmentation_duration"
ANALYSIS_DURATION = "analysis_duration"

# Counters
SENTENCES_TOTAL = "sentences_total"
DIAGNOSTICS_TOTAL = "diagnostics_total"
SENTENCES_SKIPPED_TOTAL = "sentences_skipped_total"
