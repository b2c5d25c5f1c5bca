# tests/conftest.py
from pathlib import Path

import pytest

from spicelib_core.library import LibraryIndex

# A small driver library in the style vendors ship: metadata comments above
# each .SUBCKT, continuation lines and a few device models.
SPEAKER_LIB = """\
* Example vendor library
* PRODUCT_NAME: Studio Woofer 6
* MANUFACTURER: Acme Audio
* TYPE: woofer
* DIAMETER: 6.5 in
* IMPEDANCE: 8 ohms
* qts: 0.35
* FS: 42 Hz
* SENSITIVITY: 88 dB
.SUBCKT woofer_6 plus minus
Re plus 1 6.2
Le 1 2 0.45mH
Rms 2 minus 1.1
.ENDS woofer_6

* PRODUCT_NAME: Dome Tweeter
* MANUFACTURER: Acme Audio
* TYPE: tweeter
.SUBCKT tweeter_1 plus minus
Re plus minus 5.8
.ENDS tweeter_1

.MODEL D1N4148 D(IS=2.52n RS=0.568 N=1.752
+ CJO=4p M=0.4 TT=20n)
.MODEL Q2N3904 NPN(IS=6.734f BF=416.4)
"""

MOSFET_LIB = """\
.SUBCKT irf1010n drain gate source
M1 9 7 8 8 MM L=100u W=100u
RD 9 drain 0.0045
RG gate 7 1.2
RS 8 source 0.0011
D1 source drain DBODY
.ENDS irf1010n
.MODEL MM NMOS(LEVEL=1 VTO=3.6 KP=40)
.MODEL DBODY D(IS=1.2e-12 RS=0.002)
"""


@pytest.fixture
def speaker_lib_text() -> str:
    return SPEAKER_LIB


@pytest.fixture
def mosfet_lib_text() -> str:
    return MOSFET_LIB


@pytest.fixture
def write_lib(tmp_path):
    """Returns a helper that writes a library file below tmp_path and returns its path."""
    def _write(relative_path: str, content: str) -> Path:
        path = tmp_path / relative_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path
    return _write


@pytest.fixture
def library_dir(write_lib, tmp_path) -> Path:
    """A directory holding the speaker and MOSFET libraries."""
    write_lib("libs/speakers.lib", SPEAKER_LIB)
    write_lib("libs/power/mosfets.lib", MOSFET_LIB)
    return tmp_path / "libs"


@pytest.fixture
def library_index(library_dir) -> LibraryIndex:
    index = LibraryIndex()
    index.index_libraries([library_dir])
    return index
