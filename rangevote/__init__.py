"""RangeVote: access control, lifecycle and aggregation for range-voting ballots."""
