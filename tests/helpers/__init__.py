from .html import WORDS, link_farm, page, prose
from .metric_delta import counter_value, histogram_observes, metric_delta

__all__ = ["WORDS", "counter_value", "histogram_observes", "link_farm", "metric_delta", "page", "prose"]
