"""Type hints used in Cup Manager."""

from typing import Callable, Optional, Tuple

# Tuple of participant indices in the shuffled participant list
MatchPairing = Tuple[int, int]
# All pairings for one round
RoundSchedule = Tuple[MatchPairing, ...]
# A round schedule plus the index sitting out, if any
RoundWithBye = Tuple[RoundSchedule, Optional[int]]

# Produces fresh unique identifiers
IdFactory = Callable[[], str]

#  LocalWords:  MatchPairing RoundSchedule
