"""Static character, alignment and ability reference data."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping

from .models import Ability, Role

FEMALE_CHARACTERS: tuple[str, ...] = (
    "Yennefer z Vengerbergu",
    "Filippa Eilhart",
    "Triss Merigold",
    "Keira Metz",
    "Shani",
    "Królowa Nocy (Bruxa)",
    "Ciri",
    "Margarita Laux-Antille",
    "Sabrina Glevissig",
    "Marti Södergren",
    "Nenneke",
)

MALE_CHARACTERS: tuple[str, ...] = (
    "Geralt z Rivii",
    "Emhyr var Emreis",
    "Avallac'h",
    "Zoltan Chivay",
    "Druid (Śledczy)",
    "Stregobor",
)

# Advisory only; the engine never fails because of a hint.
ALIGNMENT_HINTS: dict[str, Role] = {
    "Druid (Śledczy)": Role.CITIZEN,
    "Shani": Role.CITIZEN,
    "Marti Södergren": Role.CITIZEN,
    "Nenneke": Role.CITIZEN,
    "Zoltan Chivay": Role.CITIZEN,
    "Królowa Nocy (Bruxa)": Role.MAFIA,
    "Emhyr var Emreis": Role.MAFIA,
    "Stregobor": Role.MAFIA,
    "Filippa Eilhart": Role.MAFIA,
}

FORCED_ABILITIES: dict[str, Ability] = {
    "Druid (Śledczy)": Ability(
        name="Wiedźmińskie Tropienie",
        description="Raz na noc możesz zapytać MG o prawdziwe nastawienie jednej osoby (mafia/obywatel).",
    ),
    "Shani": Ability(
        name="Leczenie",
        description="Raz w grze możesz ochronić jedną osobę przed eliminacją (działa po głosowaniu).",
    ),
    "Marti Södergren": Ability(
        name="Eliksir Odrodzenia",
        description="Anulujesz eliminację wybranej osoby w tej rundzie (raz w grze).",
    ),
    "Nenneke": Ability(
        name="Błogosławieństwo",
        description="Raz w grze przyznajesz +1 ukryty głos wybranej osobie w głosowaniu.",
    ),
    "Zoltan Chivay": Ability(
        name="Harcownik",
        description="Raz możesz wymusić zamianę kart akcji między dwiema osobami.",
    ),
    "Królowa Nocy (Bruxa)": Ability(
        name="Przemiana",
        description="Raz możesz uniknąć ujawnienia roli lub eliminacji.",
    ),
    "Ciri": Ability(
        name="Skok Przez Wymiary",
        description="Raz pomijasz skutki akcji wymierzonej w Ciebie (po ujawnieniu).",
    ),
    "Yennefer z Vengerbergu": Ability(
        name="Aksji",
        description="Raz w grze uciszasz jedną osobę na 1 minutę debaty.",
    ),
    "Triss Merigold": Ability(
        name="Płomień Ochronny",
        description="Masz jednorazowy immunitet na akcję w nocy.",
    ),
    "Keira Metz": Ability(
        name="Iluzja",
        description="Możesz wystawić fałszywy trop UV (jednorazowo).",
    ),
    "Filippa Eilhart": Ability(
        name="Szpiegowska Sowa",
        description="Podglądasz kartę zdolności jednej osoby (bez ujawniania jej roli).",
    ),
    "Margarita Laux-Antille": Ability(
        name="Tarcza Aretuzy",
        description="Raz w grze chronisz kogoś przed nocną akcją.",
    ),
    "Sabrina Glevissig": Ability(
        name="Klątwa",
        description="Jednej osobie w turze przepada użycie karty specjalnej.",
    ),
    "Emhyr var Emreis": Ability(
        name="Intryga Cesarza",
        description="Po głosowaniu możesz zamienić miejscami dwa głosy.",
    ),
    "Avallac'h": Ability(
        name="Proroctwo",
        description="Raz pytasz MG pytanie tak/nie o dowolną osobę.",
    ),
    "Geralt z Rivii": Ability(
        name="Tropienie",
        description="Raz sprawdzasz, czy wybrana osoba użyła zdolności w tej nocy.",
    ),
    "Stregobor": Ability(
        name="Miraż",
        description="Unieważniasz jedną wskazówkę UV przygotowaną przez MG (raz).",
    ),
}

FALLBACK_ABILITIES: dict[Role, tuple[Ability, ...]] = {
    Role.MAFIA: (
        Ability(name="Fałszywy Trop", description="Możesz wprowadzić jeden mylący znak UV na trasie."),
        Ability(name="Zatrucie", description="Jedna osoba traci możliwość użycia zdolności w tej nocy."),
        Ability(name="Cisza Nocy", description="Uciszasz jedną osobę na 30 sekund w debacie."),
    ),
    Role.CITIZEN: (
        Ability(name="Znak Aard", description="Wymuszasz od MG drobny, prawdziwy hint na temat losowego tropu."),
        Ability(name="Straż", description="Chronisz jedną osobę przed jedną nocną akcją."),
        Ability(
            name="Przesłuchanie",
            description="Raz zadajesz jednej osobie pytanie, na które musi odpowiedzieć TAK/NIE.",
        ),
    ),
}


@dataclass(frozen=True)
class Catalog:
    alignment_hints: Mapping[str, Role] = field(default_factory=lambda: dict(ALIGNMENT_HINTS))
    forced: Mapping[str, Ability] = field(default_factory=lambda: dict(FORCED_ABILITIES))
    fallback: Mapping[Role, tuple[Ability, ...]] = field(default_factory=lambda: dict(FALLBACK_ABILITIES))

    def hint_for(self, character: str) -> Role | None:
        return self.alignment_hints.get(character)

    def fallback_for(self, role: Role) -> tuple[Ability, ...]:
        pool = self.fallback.get(role)
        if not pool:
            return self.fallback[Role.CITIZEN]
        return pool


DEFAULT_CATALOG = Catalog()
