import unittest

import discord

from recruitbot.banner import Banner
from recruitbot.embeds import (
    BLUE_ARCHIVE_BLUE,
    build_banner_embed,
    build_roll_embed,
    build_ten_roll_embed,
    rarity_colour,
)
from recruitbot.gacha import RecruitmentEngine
from recruitbot.models import Character, Language, LocalizedName, Rarity

CDN = "https://rerollcdn.com/BlueArchive"


def make_character(identifier: str, japanese: str, english: str, rarity: Rarity, asset: str = "") -> Character:
    names = LocalizedName({Language.JAPANESE: japanese, Language.ENGLISH: english})
    return Character(identifier=identifier, names=names, rarity=rarity, asset_key=asset or english)


class EmbedTests(unittest.TestCase):
    def setUp(self) -> None:
        self.junko = make_character("junko", "ジュンコ", "Junko", Rarity.TWO, asset="Zunko")
        self.chise = make_character("chise", "チセ", "Chise", Rarity.ONE)
        self.hoshino = make_character("hoshino", "ホシノ", "Hoshino", Rarity.THREE)
        self.hina = make_character("hina", "ヒナ", "Hina", Rarity.THREE)
        engine = RecruitmentEngine(
            [self.chise, self.junko, self.hina, self.hoshino],
            {Rarity.ONE: 79.0, Rarity.TWO: 18.5, Rarity.THREE: 2.5},
            boosted=[self.hoshino],
            boost_fraction=0.7,
        )
        names = LocalizedName({Language.JAPANESE: "ピックアップ募集", Language.ENGLISH: "Rate-Up Recruitment"})
        self.banner = Banner(names, engine, boosted=[self.hoshino])

    def test_rarity_colours(self) -> None:
        self.assertEqual(rarity_colour(Rarity.ONE), discord.Colour.from_rgb(227, 234, 240))
        self.assertEqual(rarity_colour(Rarity.THREE), discord.Colour.from_rgb(253, 198, 229))

    def test_roll_embed(self) -> None:
        embed = build_roll_embed(self.junko, CDN)
        self.assertEqual(embed.title, "ジュンコ")
        self.assertEqual(embed.description, "Junko\t:star::star:")
        self.assertEqual(embed.url, "https://www.thearchive.gg/characters/Zunko")
        self.assertEqual(embed.image.url, f"{CDN}/Characters/Zunko.png")
        self.assertEqual(embed.colour, rarity_colour(Rarity.TWO))
        self.assertEqual(embed.footer.icon_url, f"{CDN}/Icons/icon-brand.png")

    def test_roll_embed_without_english_name(self) -> None:
        character = Character(
            identifier="nonomi",
            names=LocalizedName({Language.JAPANESE: "ノノミ"}),
            rarity=Rarity.TWO,
            asset_key="Nonomi",
        )
        with self.assertLogs("recruitbot.embeds", level="WARNING"):
            embed = build_roll_embed(character, CDN)
        self.assertTrue(embed.description.startswith("ノノミ"))

    def test_ten_roll_embed_uses_best_rarity(self) -> None:
        results = [self.chise] * 9 + [self.hoshino]
        embed = build_ten_roll_embed(self.banner, results, cdn_url=CDN, filename="result.jpeg")
        self.assertEqual(embed.title, "ピックアップ募集 10-roll")
        self.assertEqual(embed.description, "Rate-Up Recruitment")
        self.assertEqual(embed.image.url, "attachment://result.jpeg")
        self.assertEqual(embed.colour, rarity_colour(Rarity.THREE))

    def test_banner_embed_lists_rate_up(self) -> None:
        embed = build_banner_embed(self.banner, image_url="https://example.com/banner.png")
        self.assertEqual(embed.title, "ピックアップ募集")
        self.assertEqual(embed.colour, BLUE_ARCHIVE_BLUE)
        self.assertEqual(embed.image.url, "https://example.com/banner.png")
        fields = {field.name: field.value for field in embed.fields}
        self.assertIn(":star::star::star: 2.5%", fields["Rates"])
        self.assertEqual(fields["Rate-Up"], "ホシノ (Hoshino) 1.75%")


if __name__ == "__main__":
    unittest.main()
