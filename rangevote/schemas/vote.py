"""Vote schemas."""
from typing import Dict, List

from pydantic import BaseModel, Field, field_validator

from rangevote.core.constants import MAX_SCORE, MIN_SCORE
from rangevote.core.sanitization import validate_id_format


class VoteRequest(BaseModel):
    # candidate_id -> score
    scores: Dict[str, int] = Field(..., min_length=1)

    @field_validator('scores')
    @classmethod
    def validate_scores(cls, v: Dict[str, int]) -> Dict[str, int]:
        """Check candidate ids and the score range."""
        for candidate_id, score in v.items():
            validate_id_format(candidate_id, "Candidate id")
            if not MIN_SCORE <= score <= MAX_SCORE:
                raise ValueError(f"Scores must be between {MIN_SCORE} and {MAX_SCORE}")
        return {candidate_id.strip(): score for candidate_id, score in v.items()}


class VoteResponse(BaseModel):
    ballot_id: str
    vote_count: int


class UserVote(BaseModel):
    candidate_id: str
    score: int


class UserVotesResponse(BaseModel):
    ballot_id: str
    votes: List[UserVote]


class ResultsResponse(BaseModel):
    ballot_id: str
    vote_count: int
    # candidate_id -> average score; unscored candidates are absent
    results: Dict[str, float]
