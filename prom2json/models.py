"""Data model for parsed exposition documents."""
from enum import Enum
from typing import Annotated, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

Labels = Dict[str, str]


class MetricType(str, Enum):
    """Kind of a metric family. Counters are represented as gauges."""
    GAUGE = "Gauge"
    HISTOGRAM = "Histogram"
    SUMMARY = "Summary"


class Sample(BaseModel):
    """A single gauge or counter sample."""
    model_config = ConfigDict(frozen=True)

    type: Literal["Metric"] = "Metric"
    labels: Optional[Labels] = None
    value: str


class SummaryRecord(BaseModel):
    """All samples of one summary label-set."""
    model_config = ConfigDict(frozen=True)

    type: Literal["Summary"] = "Summary"
    labels: Optional[Labels] = None
    quantiles: Labels = Field(default_factory=dict)  # quantile -> value
    count: str = ""
    sum: str = ""


class HistogramRecord(BaseModel):
    """All samples of one histogram label-set."""
    model_config = ConfigDict(frozen=True)

    type: Literal["Histogram"] = "Histogram"
    labels: Optional[Labels] = None
    buckets: Labels = Field(default_factory=dict)  # le bound -> cumulative count
    count: str = ""
    sum: str = ""


Record = Annotated[Union[Sample, SummaryRecord, HistogramRecord], Field(discriminator="type")]

RECORD_KIND = {
    MetricType.GAUGE: Sample,
    MetricType.HISTOGRAM: HistogramRecord,
    MetricType.SUMMARY: SummaryRecord,
}


class MetricFamily(BaseModel):
    """A named group of records sharing one type and HELP text."""
    model_config = ConfigDict(frozen=True)

    metric_type: MetricType
    metric_name: str
    help: str = ""
    data: List[Record] = Field(default_factory=list)

    @model_validator(mode='after')
    def validate_homogeneous_data(self):
        """Ensure every record matches the declared family type."""
        expected = RECORD_KIND[self.metric_type]
        for record in self.data:
            if not isinstance(record, expected):
                raise ValueError(
                    f"Family '{self.metric_name}' of type {self.metric_type.value} "
                    f"cannot hold a {record.type} record"
                )
        return self


class Document(BaseModel):
    """Every metric family of one exposition text, in source order."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    families: List[MetricFamily] = Field(default_factory=list, alias="metrics")

    @classmethod
    def from_string(cls, text: str) -> "Document":
        from prom2json.parser import parse_document
        return parse_document(text)

    def to_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)

    def to_json(self, indent: Optional[int] = None) -> str:
        return self.model_dump_json(by_alias=True, indent=indent)
