from .actionnetwork_tools import ActionNetworkClient, RateLimit, extract_items, run_rate_limited

__all__ = ["ActionNetworkClient", "RateLimit", "extract_items", "run_rate_limited"]
