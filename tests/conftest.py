import pytest


STANDARD_REPORT = """EventLink            6/12/2025, 1:52 PM
Report: Standings by Rank
Event: Draft Final Fantasy (8993570)
Event Date: 6/10/2025
Event Information: membre 17 chf non membre 20 chf

Opponents Match Win Percent : OMW%
Game Win Percent : GW%
Opponents Game Win Percent : OGW%


Rank   Name                    Pod    Points OMW%   GW%    OGW%
-------------------------------------------------------------------------------
1      Alexey Paulot           1      9      44     85     44
2      Gil Ferrari             1      6      66     66     66
3      Zacharie Jourdain       1      6      44     80     47
4      Elliot Grange           1      6      33     57     36
5      mark schwass            1      3      77     33     74
6      mi KL                   1      3      55     42     56
7      Gassmann Noé            1      1      66     33     58
8      Nicolas Casademont      1      1      44     33     47

EventLink - Copyright © 2025 - Wizards of the Coast LLC"""

SINGLE_LINE_REPORT = (
    "EventLink 6/12/2025, 1:52 PM Report: Standings by Rank Event: Draft Final Fantasy (8993570) "
    "Event Date: 6/10/2025 Event Information: membre 17 chf non membre 20 chf "
    "Opponents Match Win Percent : OMW% Game Win Percent : GW% Opponents Game Win Percent : OGW% "
    "Rank Name Pod Points OMW% GW% OGW% "
    "------------------------------------------------------------------------------- "
    "1 Alexey Paulot 1 9 44 85 44 2 Gil Ferrari 1 6 66 66 66 3 Zacharie Jourdain 1 6 44 80 47 "
    "4 Elliot Grange 1 6 33 57 36 5 mark schwass 1 3 77 33 74 6 mi KL 1 3 55 42 56 "
    "7 Gassmann Noé 1 1 66 33 58 8 Nicolas Casademont 1 1 44 33 47 "
    "EventLink - Copyright © 2025 - Wizards of the Coast LLC"
)

ACCENTED_NAMES_REPORT = """EventLink            6/12/2025, 1:52 PM
Report: Standings by Rank
Event: Duel Commander Weekly (8993572)
Event Date: 6/10/2025

Rank   Name                    Pod    Points OMW%   GW%    OGW%
-------------------------------------------------------------------------------
1      Jérôme O'Connell        1      9      44     85     44
2      Günther Müller          1      6      66     66     66
3      J. R. Smith             1      6      44     80     47
"""

MISSING_EVENT_INFO_REPORT = """Rank   Name                    Pod    Points OMW%   GW%    OGW%
-------------------------------------------------------------------------------
1      Alexey Paulot           1      9      44     85     44
2      Gil Ferrari             1      6      66     66     66
3      Zacharie Jourdain       1      6      44     80     47
"""

MALFORMED_REPORT = """This is not an EventLink report.
Just some random text that doesn't match the format.
No player data here."""

IRREGULAR_SPACING_REPORT = """EventLink            6/12/2025,   1:52 PM
Report:    Standings by Rank
Event:   Standard  FNM   (8993573)
Event Date:   6/10/2025


Rank   Name                    Pod    Points   OMW%     GW%      OGW%
-------------------------------------------------------------------------------
1      Player  One             1      9        44       85       44
2      Player  Two             1      6        66       66       66
"""


@pytest.fixture
def standard_report():
    return STANDARD_REPORT


@pytest.fixture
def single_line_report():
    return SINGLE_LINE_REPORT


@pytest.fixture
def accented_names_report():
    return ACCENTED_NAMES_REPORT


@pytest.fixture
def missing_event_info_report():
    return MISSING_EVENT_INFO_REPORT


@pytest.fixture
def malformed_report():
    return MALFORMED_REPORT


@pytest.fixture
def irregular_spacing_report():
    return IRREGULAR_SPACING_REPORT
