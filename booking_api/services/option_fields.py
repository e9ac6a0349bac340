"""
Registry of the fields available on the booking option form.

Each field carries categorical tags: 'standard' fields are shown by default,
'necessary' fields cannot be switched off in the configuration UI. Fields
listed as incompatible must not be shown together with the field.
"""

from dataclasses import dataclass, field
from typing import List, Tuple

FIELD_STANDARD = 'standard'
FIELD_EASY = 'easy'
FIELD_NECESSARY = 'necessary'


@dataclass(frozen=True)
class OptionField:
    id: int
    classname: str
    categories: Tuple[str, ...] = ()
    incompatible: Tuple[int, ...] = field(default_factory=tuple)

    @property
    def is_standard(self) -> bool:
        return FIELD_STANDARD in self.categories

    @property
    def is_necessary(self) -> bool:
        return FIELD_NECESSARY in self.categories


OPTION_FIELDS: Tuple[OptionField, ...] = (
    OptionField(10, 'id', (FIELD_STANDARD, FIELD_NECESSARY)),
    OptionField(20, 'json', (FIELD_STANDARD, FIELD_NECESSARY)),
    OptionField(30, 'returnurl', (FIELD_STANDARD, FIELD_NECESSARY)),
    OptionField(40, 'template', (FIELD_STANDARD,)),
    OptionField(50, 'text', (FIELD_STANDARD, FIELD_NECESSARY)),
    OptionField(60, 'identifier', (FIELD_STANDARD,)),
    OptionField(70, 'titleprefix', ()),
    OptionField(80, 'description', (FIELD_STANDARD, FIELD_EASY)),
    OptionField(90, 'location', (FIELD_STANDARD,)),
    OptionField(100, 'institution', ()),
    OptionField(110, 'address', ()),
    OptionField(120, 'maxanswers', (FIELD_STANDARD, FIELD_EASY)),
    OptionField(130, 'maxoverbooking', (FIELD_STANDARD,)),
    OptionField(140, 'minanswers', ()),
    OptionField(150, 'pollurl', ()),
    OptionField(160, 'courseid', (FIELD_STANDARD,)),
    OptionField(170, 'optiondates', (FIELD_STANDARD, FIELD_EASY)),
    OptionField(180, 'teachers', (FIELD_STANDARD,)),
    OptionField(190, 'responsiblecontact', ()),
    OptionField(200, 'bookingopeningtime', (FIELD_STANDARD,), (210,)),
    OptionField(210, 'easy_bookingopeningtime', (FIELD_EASY,), (200,)),
    OptionField(220, 'bookingclosingtime', (FIELD_STANDARD,), (230,)),
    OptionField(230, 'easy_bookingclosingtime', (FIELD_EASY,), (220,)),
    OptionField(240, 'availability', (FIELD_STANDARD,), (250,)),
    OptionField(250, 'easy_availability_previouslybooked', (FIELD_EASY,), (240,)),
    OptionField(260, 'price', (FIELD_STANDARD,)),
    OptionField(270, 'canceluntil', ()),
    OptionField(280, 'waitforconfirmation', ()),
    OptionField(290, 'priceformulaadd', ()),
    OptionField(300, 'customfields', (FIELD_STANDARD,)),
    OptionField(310, 'aftersubmitaction', (FIELD_STANDARD, FIELD_NECESSARY)),
)


def get_registered_fields() -> List[OptionField]:
    """All registered fields, ascending by id."""
    return sorted(OPTION_FIELDS, key=lambda f: f.id)
