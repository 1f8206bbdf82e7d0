"""Pure dataclasses for the council deliberation pipeline. No logic, no deps."""

from dataclasses import dataclass, field

ERROR_CHAIRMAN = "Error"
ALL_MODELS_FAILED_TEXT = "All models failed to respond. Please check your API keys and try again."
CHAIRMAN_FAILED_TEXT = "Error: Unable to generate final synthesis. The chairman model did not respond."

ChatMessage = dict[str, str]  # {"role": ..., "content": ...}


@dataclass(frozen=True)
class CouncilMember:
    name: str              # display label, unique within a council
    provider: str          # provider id resolved by the registry, e.g. "groq"
    model: str             # model id passed through to the provider


@dataclass(frozen=True)
class ChatOptions:
    temperature: float = 0.7
    max_tokens: int = 4096


@dataclass
class CouncilConfig:
    members: list[CouncilMember]
    chairman: CouncilMember


@dataclass
class IndividualResponse:
    member: str
    model: str
    provider: str
    response: str


@dataclass
class PeerRanking:
    member: str            # the reviewer
    model: str
    provider: str
    ranking: str           # full critique text
    parsed_ranking: list[str] = field(default_factory=list)  # "Response X" labels, best first


@dataclass
class AggregateRankingEntry:
    member: str
    average_rank: float
    rankings_count: int


@dataclass
class FinalAnswer:
    chairman: str
    model: str
    provider: str
    response: str


@dataclass(frozen=True)
class CouncilRunResult:
    query: str
    individual_responses: list[IndividualResponse]
    peer_rankings: list[PeerRanking]
    final_answer: FinalAnswer
    label_to_member: dict[str, str] = field(default_factory=dict)
    aggregate_rankings: list[AggregateRankingEntry] = field(default_factory=list)

    @property
    def is_degraded(self) -> bool:
        """True when no member answered and the run stopped after Stage 1."""
        return not self.individual_responses
