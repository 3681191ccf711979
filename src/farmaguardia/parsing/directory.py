"""Static pharmacy directories for calendars that print short codes only."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Mapping, Optional

from farmaguardia.model.pharmacy import PLACEHOLDER_ADDRESS, PLACEHOLDER_PHONE, Pharmacy
from farmaguardia.model.duty import TimeRange


@dataclass(frozen=True, slots=True)
class DirectoryEntry:
    name: str
    address: str
    phone: str = PLACEHOLDER_PHONE

    def to_pharmacy(
        self,
        *,
        additional_info: Optional[str] = None,
        operating_hours: Optional[TimeRange] = None,
        zone_id: Optional[str] = None,
    ) -> Pharmacy:
        return Pharmacy(
            name=self.name,
            address=self.address,
            phone=self.phone,
            additional_info=additional_info,
            operating_hours=operating_hours,
            zone_id=zone_id,
        )


def placeholder_entry(code: str) -> DirectoryEntry:
    """Entry for a code missing from the directory: the raw code is the name."""

    return DirectoryEntry(name=code.strip(), address=PLACEHOLDER_ADDRESS, phone=PLACEHOLDER_PHONE)


def lookup(directory: Mapping[str, DirectoryEntry], code: str) -> DirectoryEntry:
    entry = directory.get(code)
    if entry is None:
        entry = directory.get(code.upper())
    return entry or placeholder_entry(code)


CUELLAR_PHARMACIES: Dict[str, DirectoryEntry] = {
    "Av C.J. CELA": DirectoryEntry(
        "Farmacia Fernando Redondo",
        "Av. Camilo Jose Cela, 46, 40200 Cuéllar, Segovia",
    ),
    "Ctra. BAHABON": DirectoryEntry(
        "Farmacia San Andrés",
        "Ctra. Bahabón, 9, 40200 Cuéllar, Segovia",
        "921144794",
    ),
    "C/ RESINA": DirectoryEntry(
        "Farmacia Ldo. Fco. Javier Alcaraz García de la Barrera",
        "C. Resina, 14, 40200 Cuéllar, Segovia",
        "921144812",
    ),
    "STA. MARINA": DirectoryEntry(
        "Farmacia Ldo. César Cabrerizo Izquierdo",
        "Calle Sta. Marina, 5, 40200 Cuéllar, Segovia",
        "921140606",
    ),
}

EL_ESPINAR_PHARMACIES: Dict[str, DirectoryEntry] = {
    "AV. HONTANILLA 18": DirectoryEntry(
        "Farmacia Ana María Aparicio Hernán",
        "Av. Hontanilla, 18, 40400 El Espinar, Segovia",
        "921181011",
    ),
    "C/ MARQUES PERALES": DirectoryEntry(
        "Farmacia Lda M J. Bartolomé Sánchez",
        "C. Marqués de Perales, 2, 40400 El Espinar, Segovia",
        "921181171",
    ),
    "SAN RAFAEL": DirectoryEntry(
        "Farmacia San Rafael",
        "Tr.ª Alto del León, 19, 40410 San Rafael, Segovia",
        "921171105",
    ),
}

LA_GRANJA_DOLORES = "LA GRANJA - DOLORES"
LA_GRANJA_VALENCIANA = "LA GRANJA - VALENCIANA"
CANTALEJO_CODES = ("CANTALEJO-1", "CANTALEJO-2")

RURAL_PHARMACIES: Dict[str, DirectoryEntry] = {
    # Riaza / Sepúlveda
    "RIAZA": DirectoryEntry(
        "Farmacia César Fernando Gutiérrez Miguel",
        "C. Ricardo Provencio, 16, 40500 Riaza, Segovia",
        "921550131",
    ),
    "SEPÚLVEDA": DirectoryEntry(
        "Farmacia Francisco Ruiz Carrasco",
        "Pl. España, 16, 40300 Sepúlveda, Segovia",
        "921540018",
    ),
    "S.E. GORMAZ (SORIA)": DirectoryEntry(
        "Farmacia Irigoyen",
        "C. Escuelas, 5, 42330 San Esteban de Gormaz, Soria",
        "975350208",
    ),
    "CEREZO ABAJO": DirectoryEntry(
        "Farmacia Mario Caballero Serrano",
        "C. Real, 2, 40591 Cerezo de Abajo, Segovia",
        "921557110",
    ),
    "BOCEGUILLAS": DirectoryEntry(
        "Farmacia Lcda Mª del Pilar Villas Miguel",
        "C. Bayona, 21, 40560 Boceguillas, Segovia",
        "921543849",
    ),
    "AYLLÓN": DirectoryEntry(
        "Farmacia Luis de la Peña Buquerin",
        "Plaza Mayor, 12, 40520 Ayllón, Segovia",
        "921553003",
    ),
    # La Granja
    LA_GRANJA_VALENCIANA: DirectoryEntry(
        "Farmacia Cristina Mínguez Del Pozo",
        "C. Valenciana, 3, BAJO, 40100 Real Sitio de San Ildefonso, Segovia",
        "921470038",
    ),
    LA_GRANJA_DOLORES: DirectoryEntry(
        "Farmacia Almudena Martínez Pardo del Valle",
        "Plaza los de Dolores, 7, 40100 Real Sitio de San Ildefonso, Segovia",
        "921472391",
    ),
    # La Sierra
    "PRÁDENA": DirectoryEntry(
        "Farmacia Ana Belén Tomero Díez",
        "Calle Pl., 18, 40165 Prádena, Segovia",
        "921507050",
    ),
    "ARCONES": DirectoryEntry(
        "Farmacia Teresa Laporta Sánchez",
        "Pl. Mayor, 3, 40164 Arcones, Segovia",
        "921504134",
    ),
    "NAVAFRÍA": DirectoryEntry(
        "Farmacia Martín Cuesta",
        "C. la Reina, 0, 40161 Navafría, Segovia",
        "921506113",
    ),
    "TORREVAL": DirectoryEntry(
        "Farmacia Lda. Mónica Carrasco Herrero",
        "Travesia la Fragua, 16, 40171 Torre Val de San Pedro, Segovia",
        "921506028",
    ),
    # Fuentidueña
    "HONTALBILLA": DirectoryEntry(
        "Farmacia Lcdo Burgos Burgos Isabel",
        "Plaza Mayor, 1, 40353 Hontalbilla, Segovia",
        "921148190",
    ),
    "TORRECILLA": DirectoryEntry(
        "Farmacia Lcdo Gallego Esteban Fernando",
        "C. Povedas, 6, 40359 Torrecilla del Pinar, Segovia",
    ),
    "OLOMBRADA": DirectoryEntry(
        "Dr. Jesús Santos del Cura",
        "C. Real, 3, 40220 Olombrada, Segovia",
        "921164327",
    ),
    "FUENTIDUEÑA": DirectoryEntry(
        "Farmacia Fuentidueña",
        "C. Real, 40, 40357 Fuentidueña, Segovia",
        "921533630",
    ),
    "SACRAMENIA": DirectoryEntry(
        "Farmacia Gloria Hernando Bayón",
        "C. Manuel Sanz Burgoa, 14, 40237 Sacramenia, Segovia",
        "921527501",
    ),
    "FUENTESAUCO": DirectoryEntry(
        "Farmacia Paloma María Prieto Pérez",
        "Plaza Mercado, 0, 40355 Fuentesaúco de Fuentidueña, Segovia",
    ),
    # Carbonero
    "NAVALMANZANO": DirectoryEntry(
        "Farmacia Carmen I. Tomero Díez",
        "Pl. Mayor, 2, 40280 Navalmanzano, Segovia",
        "921575109",
    ),
    "CARBONERO M": DirectoryEntry(
        "Farmacia Carbonero",
        "Pl. Pósito Real, 1, 40270 Carbonero el Mayor, Segovia",
        "921560427",
    ),
    "ZARZUELA PINAR": DirectoryEntry(
        "Farmacia Maria Sol Benito Sanz",
        "C/ Caño, 7, 40293 Zarzuela del Pinar, Segovia",
        "921574621",
    ),
    "ESCARABAJOSA": DirectoryEntry(
        "Farmacia Gilsanz",
        "Pl. Mayor, 40291 Escarabajosa de Cabezas, Segovia",
        "921562159",
    ),
    "LASTRAS DE CUÉLLAR": DirectoryEntry(
        "Farmacia Mª Antonia Sacristán Rodríguez",
        "C. Rincón, 3, 40352 Lastras de Cuéllar, Segovia",
        "921169250",
    ),
    "FUENTEPELAYO": DirectoryEntry(
        "Farmacia Lda. Patricia Avellón Senovilla",
        "C. Santillana, 3, 40260 Fuentepelayo, Segovia",
        "921574392",
    ),
    "CANTIMPALOS": DirectoryEntry(
        "Farmacia Enrique Covisa Nager",
        "Pl. Mayor, 17, 40360 Cantimpalos, Segovia",
        "921496025",
    ),
    "AGUILAFUENTE": DirectoryEntry(
        "Farmacia Miriam Chamorro García",
        "Av. del Escultor D. Florentino Trapero, 5, 40340 Aguilafuente, Segovia",
        "921572445",
    ),
    "MOZONCILLO": DirectoryEntry(
        "Farmacia Isabel Frías López",
        "C. Real, 16-18, 40250 Mozoncillo, Segovia",
        "921577273",
    ),
    "ESCALONA": DirectoryEntry(
        "Farmacia Matilde García García",
        "C. de la Cruz, 6, 40350 Escalona del Prado, Segovia",
        "921570026",
    ),
    # Nava de la Asunción
    "COCA": DirectoryEntry(
        "Farmacia Ana Isabel Maroto Arenas",
        "Pl. Arco, 2, 40480 Coca, Segovia",
        "921586677",
    ),
    "STA. Mª REAL": DirectoryEntry(
        "Farmacia Pilar Tribiño Mendiola",
        "Pl. Mayor, 11, 40440 Santa María la Real de Nieva, Segovia",
        "921594013",
    ),
    "NIEVA": DirectoryEntry(
        "Farmacia María Dolores Gómez Roán",
        "Calle Ayuntamiento, 12, 40447 Nieva, Segovia",
        "921594727",
    ),
    "SANTIUSTE": DirectoryEntry(
        "Farmacia Lda Amparo Maroto Gomez",
        "Pl. Iglesia, 5, 40460 Santiuste de San Juan Bautista, Segovia",
        "921596259",
    ),
    "NAVAS DE ORO": DirectoryEntry(
        "Farmacia Cubero. Gdo. Sergio Cubero de Blas",
        "C. Libertad, 1, 40470 Navas de Oro, Segovia",
        "921591585",
    ),
    "NAVA DE LA A": DirectoryEntry(
        "Farmacia Ldo. Vicente Rebollo Antolín Javier",
        "C. de Elías Vírseda, 3, 40450 Nava de la Asunción, Segovia",
        "921580533",
    ),
    "BERNARDOS": DirectoryEntry(
        "Farmacia Lcdo Casado Rata Coral",
        "Pl. Mayor, 8, 40430 Bernardos, Segovia",
        "921566012",
    ),
    # Villacastín
    "VILLACASTÍN": DirectoryEntry(
        "Farmacia Cristina Herradón Gil-Gallardo",
        "Calle Iglesia, 18, 40150 Villacastín, Segovia",
        "921198173",
    ),
    "ZARZUELA M.": DirectoryEntry(
        "Farmacia María A. Reviriego Morcuende",
        "Av. San Antonio, 2, 40152 Zarzuela del Monte, Segovia",
        "921198297",
    ),
    "NAVAS DE SA": DirectoryEntry(
        "Farmacia María José Martín Barguilla",
        "C. Diana, 21, 40408 Navas de San Antonio, Segovia",
        "921193128",
    ),
    "MAELLO (ÁVILA)": DirectoryEntry(
        "Farmacia Noelia Guerra García",
        "Calle Vilorio, 8, 05291 Maello, Ávila",
        "921192126",
    ),
    # Cantalejo is not printed in the rural calendar; both pharmacies are listed.
    "CANTALEJO-1": DirectoryEntry(
        "Farmacia en Cantalejo",
        "C. Frontón, 15, 40320 Cantalejo, Segovia",
        "921520053",
    ),
    "CANTALEJO-2": DirectoryEntry(
        "Farmacia Carmen Bautista",
        "C. Inge Martín Gil, 10, 40320 Cantalejo, Segovia",
        "921520005",
    ),
}

# Misprints seen in the published calendars.
RURAL_ALIASES: Dict[str, str] = {
    "TORRECELLA": "TORRECILLA",
}


__all__ = [
    "DirectoryEntry",
    "placeholder_entry",
    "lookup",
    "CUELLAR_PHARMACIES",
    "EL_ESPINAR_PHARMACIES",
    "RURAL_PHARMACIES",
    "RURAL_ALIASES",
    "LA_GRANJA_DOLORES",
    "LA_GRANJA_VALENCIANA",
    "CANTALEJO_CODES",
]
