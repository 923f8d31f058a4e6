import pytest

SHEET_CSV = (
    "UID,Crop,Location,Units to Harvest,Harvest Units,Assignee(s),Harvest Date,Status,"
    "Time to Harvest (min),Harvest Weight (kg),Time to Wash & Pack (mins),Field Crew Notes,CSA\n"
    "u-1,Kale,Field A,12,bunches,,7/4/2024,,,,,,4\n"
    'u-2,Carrots,"Cobourg, Market",3.5,kg,Ana,2024-07-04,Assigned,,,,"She said ""hi""",\n'
    "u-3,Beets,Field B,0,kg,,7/4/2024,,,,,,\n"
    "u-4,Garlic,Field C,5,bulbs,Luis,7/4/2024,Completed,20,3,10,,\n"
    ",Chard,Field D,2,bunches,,7/5/2024,,,,,,\n"
    "u-6,,Field E,4,kg,,7/4/2024,,,,,,\n"
)


class FakeSource:
    def __init__(self, text="", error=None):
        self.text = text
        self.error = error
        self.calls = 0

    async def fetch_text(self):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.text


class FakeWriter:
    def __init__(self, error=None):
        self.error = error
        self.calls = []

    async def patch_row(self, uid, changes):
        self.calls.append((uid, dict(changes)))
        if self.error is not None:
            raise self.error
        return {"updated": 1}


@pytest.fixture
def sheet_csv():
    return SHEET_CSV
