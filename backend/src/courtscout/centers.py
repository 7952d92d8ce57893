"""Static list of Israel Tennis Centers locations."""

from dataclasses import asdict, dataclass


@dataclass(frozen=True)
class TennisCenter:
    id: str  # ITEC unit_id
    name: str  # Hebrew name as shown on the booking site
    name_en: str
    lat: float
    lng: float

    def to_dict(self) -> dict:
        data = asdict(self)
        data["nameEn"] = data.pop("name_en")
        return data


TENNIS_CENTERS: tuple[TennisCenter, ...] = (
    TennisCenter("12", "אופקים", "Ofakim", 31.30616437087573, 34.61839330834949),
    TennisCenter("8", "אשקלון", "Ashkelon", 31.656118690727624, 34.573327325766876),
    TennisCenter("11", "באר שבע", "Beer Sheva", 31.257875366327724, 34.78652915189627),
    TennisCenter("40", "דימונה", "Dimona", 31.078190384674862, 35.03244668995524),
    TennisCenter("5", "חיפה", "Haifa", 32.794756758968816, 34.96628564681971),
    TennisCenter("9", "טבריה", "Tiberias", 32.778481460151134, 35.5193407066796),
    TennisCenter("3", "יפו", "Jaffa", 32.037729122786715, 34.756794087999964),
    TennisCenter("14", "יקנעם", "Yokneam", 32.64778372990844, 35.09371973190228),
    TennisCenter("7", "ירושלים", "Jerusalem", 31.754038978225275, 35.1913290118779),
    TennisCenter("46", "כוכב יאיר", "Kochav Yair", 32.21982951001673, 34.99558134220021),
    TennisCenter("37", "נהריה", "Nahariya", 32.99030352435009, 35.08444251880859),
    TennisCenter("15", "סאג'ור", "Sajur", 32.93668593119547, 35.33911521658848),
    TennisCenter("16", "עכו", "Acre", 32.91899247817856, 35.094561733199114),
    TennisCenter("6", "ערד", "Arad", 31.259981855276546, 35.21702060238775),
    TennisCenter("10", "קרית אונו", "Kiryat Ono", 32.06552376938786, 34.86130143897151),
    TennisCenter("4", "קרית שמונה", "Kiryat Shmona", 33.22382145171928, 35.57752954780776),
    TennisCenter("2", "רמת השרון", "Ramat Hasharon", 32.13076914371325, 34.83886335679337),
    TennisCenter("13", "תל אביב (יד אליהו)", "Tel Aviv (Yad Eliyahu)", 32.05524276032164, 34.80180722680227),
)


def get_center(center_id: str) -> TennisCenter | None:
    return next((c for c in TENNIS_CENTERS if c.id == center_id), None)
