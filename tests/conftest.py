"""
Shared sample documents and constants for finporter tests.

All vendor samples are defined here as module-level constants so every
test module decodes the same documents. They reproduce the real export
layouts (banner lines, quoting, trailing commas, summary rows) with
anonymized accounts. If a vendor layout changes, update the sample here.
"""

from datetime import datetime, timezone

import pytest

# Dates in the samples are US Eastern; tests pin the zone so noon
# resolves to a fixed instant regardless of the machine's local zone.
NEW_YORK = "America/New_York"


def utc(*args: int) -> datetime:
    """Shorthand for an aware UTC datetime."""
    return datetime(*args, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Schwab
# ---------------------------------------------------------------------------
CHUCK_POSITIONS_HEADER = (
    '"Symbol","Description","Quantity","Price","Price Change $","Price Change %",'
    '"Market Value","Day Change $","Day Change %","Cost Basis","Gain/Loss $",'
    '"Gain/Loss %","Reinvest Dividends?","Capital Gains?","% Of Account",'
    '"Dividend Yield","Last Dividend","Ex-Dividend Date","P/E Ratio",'
    '"52 Week Low","52 Week High","Volume","Intrinsic Value","In The Money",'
    '"Security Type",'
)

_SCHB = (
    '"SCHB","SCHWAB US BROAD MARKET ETF","961","$117.42","$0.10","+0.09%",'
    '"$23,230.62","$96.10","+0.09%","$100,975.73","$2,254.89","+2.23%","No","--",'
    '"99.49%","+1.2%","$0.34","9/22/2021","--","$76.51","$109.81","432,087","--",'
    '"--","ETFs & Closed End Funds",'
)
_VOO = (
    '"VOO","VANGUARD S&P","10","$211.00","$0.10","+0.09%","$2,010.00","$96.10",'
    '"+0.09%","$2,010.00","$2,254.89","+2.23%","No","--","99.49%","+1.2%","$0.34",'
    '"9/22/2021","--","$76.51","$109.81","432,087","--","--","ETFs & Closed End Funds",'
)
_IAU = (
    '"IAU","STATE STREET GOLD","50","$111.00","$0.10","+0.09%","$5,050.00","$96.10",'
    '"+0.09%","$5,050.00","$2,254.89","+2.23%","No","--","99.49%","+1.2%","$0.34",'
    '"9/22/2021","--","$76.51","$109.81","432,087","--","--","ETFs & Closed End Funds",'
)
_CASH = (
    '"Cash & Cash Investments","--","--","--","--","--","$42.82","$0.00","0%","--",'
    '"--","--","--","--","0.51%","--","--","--","--","--","--","--","--","--",'
    '"Cash and Money Market",'
)
_TOTAL = (
    '"Account Total","--","--","--","--","--","$23,755.44","$96.10","+0.09%",'
    '"$23,975.73","$1,254.89","+2.23%","--","--","--","--","--","--","--","--",'
    '"--","--",'
)

CHUCK_POSITIONS_ALL_PREFIX = (
    '"Positions for All-Accounts as of 09:59 PM ET, 09/26/2021"\n'
    "\n"
    '"Individual                        XXXX-1234"\n'
    '"Symbol","Description","Quantity","Price","Price Change $","Price Change %",'
    '"Market Value","Day Change $","Day Change %","Cost Basis","Gain/Loss $",...\n'
)

CHUCK_POSITIONS_ALL = "\n".join([
    '"Positions for All-Accounts as of 09:59 PM ET, 09/26/2021"',
    "",
    '"Individual                        XXXX-1234"',
    CHUCK_POSITIONS_HEADER,
    _SCHB,
    _CASH,
    _TOTAL,
    "",
    '"Roth IRA                        XXXX-5678"',
    CHUCK_POSITIONS_HEADER,
    _VOO,
    _IAU,
    _CASH,
    _TOTAL,
    "",
    "",
])

CHUCK_POSITIONS_INDIV = "\n".join([
    '"Positions for account Individual                        XXXX-1234 as of 09:59 PM ET, 09/26/2021"',
    "",
    CHUCK_POSITIONS_HEADER,
    _SCHB,
    _CASH,
    _TOTAL,
    "",
])

CHUCK_HISTORY_HEADER = '"Date","Action","Symbol","Description","Quantity","Price","Fees & Comm","Amount",'

CHUCK_HISTORY = "\n".join([
    '"Transactions  for account XXXX-1234 as of 09/27/2021 22:00:26 ET"',
    CHUCK_HISTORY_HEADER,
    '"08/03/2021","Promotional Award","","PROMOTIONAL AWARD","","","","$100.00",',
    '"07/02/2021","Buy","SCHB","SCHWAB US BROAD MARKET ETF","961","$105.0736","","-$100975.73",',
    '"06/16/2021","Security Transfer","NO NUMBER","TOA ACAT 0226","","","","$101000.00",',
    'Transactions Total,"","","","","","",$524.82',
    "",
    '"Transactions  for account XXXX-5678 as of 09/27/2021 22:00:26 ET"',
    CHUCK_HISTORY_HEADER,
    '"09/27/2021","Sell","VOO","VANGUARD S&P 500","10","$137.1222","","$1370.12",',
    '"07/16/2021 as of 07/15/2021","Bank Interest","","BANK INT 061621-071521 SCHWAB BANK","","","","$0.55",',
    'Transactions Total,"","","","","","",$524.82',
])

CHUCK_SALES = "\n".join([
    "Realized Gain/Loss for XXXX-1234 for 08/29/2021 to 09/28/2021 as of Tue Sep 28  23:17:11 EDT 2021",
    '"Symbol","Name","Closed Date","Quantity","Proceeds","CostBasis","Total Gain/Loss ($)",'
    '"Total Gain/Loss (%)","Long Term Gain/Loss ($)","Long Term Gain/Loss (%)",'
    '"Short Term Gain/Loss ($)","Short Term Gain/Loss (%)","Wash Sale?","Disallowed Loss",'
    '"Transaction Closed Date","Transaction Cost Basis","Total Transaction Gain/Loss ($)",'
    '"Total Transaction Gain/Loss (%)","LT Transaction Gain/Loss ($)",'
    '"LT Transaction Gain/Loss (%)","ST Transaction Gain/Loss ($)","ST Transaction Gain/Loss (%)"',
    '"VEA","VANGUARD TAX-MANAGEDINTL FD FTSE DEV MKTETF","09/27/2021","3","$12.00","$10.00",'
    '"$2.00","1.95%","0.50","--","$1.50","1.95%","No","","","","","","","","",""',
])

# ---------------------------------------------------------------------------
# Fidelity
# ---------------------------------------------------------------------------
FIDO_HISTORY_HEADER = (
    "Run Date,Account,Action,Symbol,Security Description,Security Type,Quantity,"
    "Price ($),Commission ($),Fees ($),Accrued Interest ($),Amount ($),Settlement Date"
)

FIDO_HISTORY = "\n".join([
    "",
    "",
    "",
    "Brokerage",
    "",
    FIDO_HISTORY_HEADER,
    " 03/01/2021,MY TACTICAL (taxable) X00000000, YOU BOUGHT VANGUARD LARGE-CAP INDEX FUND (VV) (Cash),"
    " VV, VANGUARD LARGE-CAP INDEX FUND,Cash,0.999,180.95,,,,-150.00,03/03/2021",
    " 03/15/2021,MY TACTICAL (taxable) X00000000, YOU SOLD VANGUARD LARGE-CAP INDEX FUND (VV) (Cash),"
    " VV, VANGUARD LARGE-CAP INDEX FUND,Cash,,,,,,150.00,03/17/2021",
    " 03/31/2021,MY TACTICAL (taxable) X00000000, DIVIDEND RECEIVED VANGUARD LARGE-CAP INDEX FUND (VV) (Cash),"
    " VV, VANGUARD LARGE-CAP INDEX FUND,Cash,,,,,,12.34,",
    "",
    "XXX",
])

FIDO_POSITIONS_HEADER = (
    "Account Number,Account Name,Symbol,Description,Quantity,Last Price,Last Price Change,"
    "Current Value,Today's Gain/Loss Dollar,Today's Gain/Loss Percent,Total Gain/Loss Dollar,"
    "Total Gain/Loss Percent,Percent Of Account,Cost Basis,Cost Basis Per Share,Type"
)

FIDO_POSITIONS = "\n".join([
    FIDO_POSITIONS_HEADER,
    "X12345678,MY TACTICAL,SPAXX**,HELD IN MONEY MARKET,1000,$1.00,,$1000.00,,,,,10.00%,,,Cash",
    "X12345678,MY TACTICAL,VTI,VANGUARD TOTAL STOCK MARKET ETF,10,$220.00,+$1.10,$2200.00,"
    "+$11.00,+0.50%,+$200.00,+10.00%,90.00%,$2000.00,$200.00,Margin",
    "X12345678,MY TACTICAL,Pending Activity,,,,,$-5.00,,,,,,,,",
    "",
    '"The data and information in this spreadsheet is provided to you solely for your use."',
])

FIDO_SALES_HEADER = (
    "Symbol(CUSIP),Security Description,Quantity,Date Acquired,Date Sold,Proceeds,"
    "Cost Basis,Short Term Gain/Loss,Long Term Gain/Loss"
)

FIDO_SALES = "\n".join([
    FIDO_SALES_HEADER,
    "VTI(922908769),VANGUARD INDEX FDS VANGUARD TOTAL STK MKT ETF,10,03/01/2020,03/02/2021,"
    "$2000.00,$1500.00,,$500.00",
    "SPY(78462F103),SPDR S&P 500 ETF,5,01/04/2021,02/01/2021,$1900.00,$1850.00,$50.00,",
    "",
])

FIDO_SALES_URL = "/downloads/Realized_Gain_Loss_Account_X12345678.csv"

# ---------------------------------------------------------------------------
# AllocateSmartly
# ---------------------------------------------------------------------------
ALLOC_SMART_HEADER = (
    'Asset,Description,"Optimal Allocation",Change,"USD Allocation","USD Change",'
    '"Optimal Total Shares"'
)

ALLOC_SMART = "\n".join([
    "AllocateSmartly.com",
    "Model Portfolio Export",
    "Export time: 2021-03-31 10:57:42 EDT",
    "",
    "20M",
    "Account Size, 00100000",
    ALLOC_SMART_HEADER,
    'DBC,Commodities,0.00%,-11.97%,"0","-11,973","0"',
    'EFA,International Equities,1.91%,-0.54%,"1906","-540","25"',
    'EWJ,Japan Equities,0.00%,-1.32%,"0","-1,322","0"',
    'GLD,Gold,1.08%,-0.43%,"1081","-433","6"',
    'IEF,Int-Term US Treasuries,21.52%,+0.29%,"21520","293","190"',
    'IWM,US Small Cap Equities,0.00%,-6.67%,"0","-6,667","0"',
    'SCZ,Intl Small Cap Equities,0.00%,-29.00%,"0","-29,000","0"',
    'SPY,S&P 500,28.75%,+22.05%,"28748","22,051","72"',
    'TLT,Long-Term US Treasuries,2.18%,-0.35%,"2179","-348","15"',
    'VGK,Europe Equities,7.61%,+4.08%,"7607","4,079","120"',
    'VNQ,US Real Estate,2.39%,+2.39%,"2393","2,393","26"',
    'CASH,Cash,34.57%,+21.47%,"34567","21,467","n/a"',
    "",
    "40M",
    "Account Size, 00100000",
    ALLOC_SMART_HEADER,
    'DBC,Commodities,0.00%,-11.14%,"0","-11,144","0"',
    'EFA,International Equities,3.81%,-1.08%,"3812","-1,079","50"',
    'EWJ,Japan Equities,0.00%,-0.99%,"0","-992","0"',
    'GLD,Gold,2.16%,-0.87%,"2161","-867","13"',
    'IEF,Int-Term US Treasuries,18.04%,+0.59%,"18040","587","159"',
    'IWM,US Small Cap Equities,0.00%,-5.00%,"0","-5,000","0"',
    'SCZ,Intl Small Cap Equities,0.00%,-24.67%,"0","-24,667","0"',
    'SPY,S&P 500,32.50%,+21.07%,"32497","21,070","81"',
    'TLT,Long-Term US Treasuries,4.36%,-0.70%,"4357","-696","31"',
    'VGK,Europe Equities,5.71%,+3.06%,"5705","3,059","90"',
    'VNQ,US Real Estate,1.79%,+1.79%,"1795","1,795","19"',
    'CASH,Cash,31.63%,+17.93%,"31633","17,933","n/a"',
    "",
    "XXX",
])

# ---------------------------------------------------------------------------
# Canonical tabular documents
# ---------------------------------------------------------------------------
TABULAR_ACCOUNTS = "accountID,title,isActive,isTaxable\nA1,,true,false\n,Main,true,false\n"


# ---------------------------------------------------------------------------
# Pytest markers
# ---------------------------------------------------------------------------
def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers",
        "integration: mark test as integration test (decodes full sample documents end to end)",
    )
