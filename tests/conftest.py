# FILE: tests/conftest.py

import pytest
import sys
import os
import logging

# Add src directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from edi_options import EdiOptions

# ==============================================================================
# PYTEST CONFIGURATION & HOOKS
# ==============================================================================

def pytest_configure(config):
    """Configure pytest settings and markers."""
    config.addinivalue_line("markers", "unit: Pure unit tests with no external dependencies.")
    config.addinivalue_line("markers", "integration: Tests that exercise several components or the CLI end to end.")

@pytest.fixture(scope="session", autouse=True)
def setup_test_environment(pytestconfig):
    """Set up test environment with logging configuration."""
    # Use pytest's log_cli_level if available, otherwise default to INFO
    log_level = pytestconfig.getoption("log_cli_level") or "INFO"
    logging.basicConfig(
        level=log_level.upper(),
        format="[%(asctime)s] [%(levelname)s] [%(name)s:%(lineno)d] - %(message)s",
        stream=sys.stdout,
        force=True,
    )
    logging.info(f"Test logging configured with level: {log_level.upper()}")
    yield

# ==============================================================================
# TEST DATA
# ==============================================================================

ISA_00501 = "ISA*00*          *00*          *ZZ*SENDERID       *ZZ*RECEIVERID     *240715*1200*^*00501*000000001*0*P*>~"
ISA_00401 = "ISA*00*          *00*          *ZZ*SENDERID       *ZZ*RECEIVERID     *240715*1200*U*00401*000000001*0*P*>~"

@pytest.fixture(scope="session")
def x12_options() -> EdiOptions:
    """Explicit framing for the compact fixtures."""
    return EdiOptions(segment_terminator="~", element_separator="*")

@pytest.fixture(scope="session")
def valid_837p_edi_string() -> str:
    """Provides a shared 837P EDI string, one segment per line, as it usually arrives from trading partners."""
    return """
ISA*00*          *00*          *ZZ*SENDERID       *ZZ*RECEIVERID     *240715*1200*^*00501*000000001*0*P*>~
GS*HC*SENDER*RECEIVER*20240715*1200*1*X*005010X222A1~
ST*837*0001*005010X222A1~
BHT*0019*00*1234*20240715*1200*CH~
NM1*41*2*PREMIER BILLING*****46*SUBMITTER1~
PER*IC*JOHN DOE*TE*8005551212~
NM1*40*2*PAYER A*****46*RECEIVER1~
HL*1**20*1~
NM1*85*2*BILLING PROVIDER*****XX*1234567890~
N3*123 MAIN ST~
N4*ANYTOWN*CA*90210~
REF*EI*123456789~
HL*2*1*22*0~
SBR*P*18*GRP123******CI~
NM1*IL*1*DOE*JOHN****MI*SUBID123~
NM1*PR*2*PAYER A*****PI*PAYERID123~
CLM*PATCTRL123*500***11>B>1*Y*A*Y*Y~
DTP*431*D8*20240715~
HI*BK>87340^BF>4019~
LX*1~
SV1*HC>99213*125*UN*1***1**Y~
DTP*472*D8*20240715~
SE*22*0001~
GE*1*1~
IEA*1*000000001~
""".strip()

@pytest.fixture(scope="session")
def compact_edi_string(valid_837p_edi_string: str) -> str:
    """The 837P fixture without line breaks, so it can be compared byte for byte after writing."""
    return valid_837p_edi_string.replace("\n", "")

@pytest.fixture(scope="session")
def multiple_transaction_sets_edi_string() -> str:
    """
    One interchange, one functional group, two transaction sets (ST-SE blocks).
    """
    return (
        ISA_00501
        + "GS*HC*SENDER*RECEIVER*20240715*1200*1*X*005010X222A1~"
        + "ST*837*0001*005010X222A1~"
        + "BHT*0019*00*TXN001*20240715*1200*CH~"
        + "CLM*TXN001_CLAIM1*300***11>B>1*Y*A*Y*Y~"
        + "SE*4*0001~"
        + "ST*837*0002*005010X222A1~"
        + "BHT*0019*00*TXN002*20240715*1200*CH~"
        + "CLM*TXN002_CLAIM1*450***11>B>1*Y*A*Y*Y~"
        + "DTP*431*D8*20240715~"
        + "SE*5*0002~"
        + "GE*2*1~"
        + "IEA*1*000000001~"
    )

@pytest.fixture(scope="session")
def multiple_functional_groups_edi_string() -> str:
    """
    One interchange with two functional groups, each holding one transaction set.
    """
    return (
        ISA_00501
        + "GS*HC*SENDER1*RECEIVER1*20240715*1200*1*X*005010X222A1~"
        + "ST*837*0001*005010X222A1~"
        + "BHT*0019*00*GRP1_TXN1*20240715*1200*CH~"
        + "SE*3*0001~"
        + "GE*1*1~"
        + "GS*HC*SENDER2*RECEIVER2*20240715*1300*2*X*005010X222A1~"
        + "ST*837*0001*005010X222A1~"
        + "BHT*0019*00*GRP2_TXN1*20240715*1300*CH~"
        + "SE*3*0001~"
        + "GE*1*2~"
        + "IEA*2*000000001~"
    )

@pytest.fixture(scope="session")
def version_00401_edi_string() -> str:
    """An 00401 interchange: ISA11 is the standards identifier and must not act as a separator."""
    return ISA_00401 + "GS*PO*SENDER*RECEIVER*20240715*1200*1*X*004010~REF*ZZ*A^B~GE*0*1~IEA*1*000000001~"
