"""
Shared fixtures for the boat scraper tests.
"""

import pytest


BASE_URL = "https://www.bandofboats.com"
VENDOR_URL = f"{BASE_URL}/fr/professionnels/marina-sud"


@pytest.fixture
def base_url():
    return BASE_URL


@pytest.fixture
def vendor_url():
    return VENDOR_URL


@pytest.fixture
def boat_html():
    """Listing page with key characteristics, two inventory categories and a dealer link"""
    return """
    <html>
    <body>
        <span data-cash-sentinel="boat-year"> 2008 </span>
        <div id="description">
            <span class="titleKey">Caractéristiques clés</span>
            <ul class="lstDetails">
                <li><span>Longueur :</span><strong> 12,50 m </strong></li>
                <li><span>Moteur:</span><strong>2 x 300 CV</strong></li>
            </ul>
        </div>
        <div id="textDescription">
            Beau voilier bien entretenu.
        </div>
        <div id="detailed_inventory">
            <div class="blockCateg">
                <div class="titleCateg"> Electronique </div>
                <ul class="lstDetails">
                    <li><span>GPS:</span><strong>Oui</strong></li>
                    <li><span>Radar:</span><strong>Non</strong></li>
                </ul>
            </div>
            <div class="blockCateg">
                <div class="titleCateg">Confort</div>
                <ul class="lstDetails">
                    <li><span>Cabines:</span><strong>3</strong></li>
                </ul>
            </div>
        </div>
        <div class="sold">
            <a class="fap-link" href="/fr/professionnels/marina-sud">Voir le vendeur</a>
        </div>
    </body>
    </html>
    """


@pytest.fixture
def bare_boat_html():
    """Listing page with none of the optional sections"""
    return """
    <html>
    <body>
        <span data-cash-sentinel="boat-year">1995</span>
        <div id="textDescription">Bateau de pêche.</div>
    </body>
    </html>
    """


@pytest.fixture
def vendor_html():
    """Dealer page with every vendor field present"""
    return """
    <html>
    <body>
        <div class="container">
            <div class="description"> Concessionnaire depuis 1990. </div>
        </div>
        <div class="oneCardPro">
            <h2> Marina Sud </h2>
            <p class="address"> 1 quai des Pêcheurs </p>
            <p class="city"><span>13002</span> Marseille</p>
            <p class="country">France</p>
        </div>
        <div id="map" data-coordinates="(5.3698,43.2965)"></div>
        <a id="btnCallOffice" rel="+33491000000">Appeler</a>
        <a id="btnEmailOffice" rel="contact@marina-sud.fr">Écrire</a>
    </body>
    </html>
    """


@pytest.fixture
def vendor_html_without_map(vendor_html):
    return vendor_html.replace('<div id="map" data-coordinates="(5.3698,43.2965)"></div>', '')
