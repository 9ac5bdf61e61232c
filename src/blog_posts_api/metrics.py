"""Shared OTel metrics instruments for the service."""

from opentelemetry import metrics

METER_NAME = "blog_posts_api"

meter = metrics.get_meter(METER_NAME)

post_requests_total = meter.create_counter(
    name="post_requests_total",
    description="Post operations handled, by operation and outcome",
    unit="1",
)

store_errors_total = meter.create_counter(
    name="store_errors_total",
    description="Relational store failures surfaced as 500 responses",
    unit="1",
)

post_list_results = meter.create_histogram(
    name="post_list_results",
    description="Number of posts returned per listing page",
    unit="1",
)
