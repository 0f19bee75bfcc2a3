import io
import zipfile

import pytest

EL_TARTER = (
    "3039154\tEl Tarter\tEl Tarter\tAnsalonga,Ehl Tarter,El Tarter\t42.57952\t1.65362"
    "\tP\tPPL\tAD\t\t02\t\t\t\t1052\t\t1721\tEurope/Andorra\t2012-11-03"
)
ANDORRA_LA_VELLA = (
    "3041563\tAndorra la Vella\tAndorra la Vella\tALV,Andora,Andorra la Vieja\t42.50779\t1.52109"
    "\tP\tPPLC\tAD\t\t07\t\t\t\t20430\t\t1037\tEurope/Andorra\t2020-03-03"
)
LES_ESCALDES = (
    "3040051\tles Escaldes\tles Escaldes\tEscaldes,Escaldes-Engordany\t42.50729\t1.53414"
    "\tP\tPPLA\tAD\t\t08\t\t\t\t15853\t\t1033\tEurope/Andorra\t2008-10-15"
)


@pytest.fixture
def place_lines():
    return [EL_TARTER, ANDORRA_LA_VELLA, LES_ESCALDES]


@pytest.fixture
def place_bytes(place_lines):
    return ("\n".join(place_lines) + "\n").encode("utf-8")


@pytest.fixture
def deletion_bytes():
    return (
        "2993838\tLa Massana\tduplicate of 3040132\n"
        "6301234\tOld Mill\tnot a populated place\n"
    ).encode("utf-8")


@pytest.fixture
def make_zip():
    def _make(entries: dict[str, bytes]) -> bytes:
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
            for name, content in entries.items():
                archive.writestr(name, content)
        return buffer.getvalue()

    return _make
