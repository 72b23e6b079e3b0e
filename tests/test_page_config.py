"""Unit tests for page configuration and settings conversion."""

import unittest

from breakmark.page_config import (
    FONT_METRICS,
    PAGE_DIMENSIONS,
    FontFamily,
    LineStyle,
    MarkerStyle,
    Orientation,
    OverlaySettings,
    PageConfiguration,
    PageSize,
    validate_setting_value,
)


class TestPageConfiguration(unittest.TestCase):

    def test_defaults(self):
        config = PageConfiguration()
        self.assertEqual(config.page_size, PageSize.A4)
        self.assertEqual(config.orientation, Orientation.PORTRAIT)
        self.assertEqual(config.margin_top, 25.4)
        self.assertEqual(config.margin_bottom, 25.4)
        self.assertEqual(config.font_size, 12.0)
        self.assertEqual(config.line_height, 1.5)
        self.assertEqual(config.font_family, FontFamily.DEFAULT)
        self.assertEqual(config.calibration_offset, 0.0)
        self.assertEqual(config.min_break_spacing, 50.0)

    def test_page_dimensions(self):
        self.assertEqual(PAGE_DIMENSIONS[PageSize.A4].height, 297.0)
        self.assertEqual(PAGE_DIMENSIONS[PageSize.LETTER].width, 215.9)
        self.assertEqual(PAGE_DIMENSIONS[PageSize.LEGAL].height, 355.6)

    def test_font_metrics_in_expected_range(self):
        for family in FontFamily:
            self.assertGreaterEqual(family.metric, 0.98)
            self.assertLessEqual(family.metric, 1.05)
        self.assertEqual(FontFamily.DEFAULT.metric, 1.0)
        self.assertEqual(set(FONT_METRICS), {f.value for f in FontFamily})

    def test_landscape_swaps_flow_axis(self):
        config = PageConfiguration(page_size=PageSize.LETTER, orientation=Orientation.LANDSCAPE)
        self.assertEqual(config.flow_length_mm, 215.9)
        self.assertEqual(config.cross_length_mm, 279.4)

    def test_row_height_pixels(self):
        # 12pt = 16px, times 1.5 line height
        self.assertAlmostEqual(PageConfiguration().row_height_pixels, 24.0)

    def test_marker_style_rgb(self):
        self.assertEqual(MarkerStyle(line_color="#3b82f6").rgb, (0x3b, 0x82, 0xf6))


class TestOverlaySettingsConversion(unittest.TestCase):

    def test_round_trip(self):
        settings = OverlaySettings().with_page(
            page_size=PageSize.LEGAL,
            orientation=Orientation.LANDSCAPE,
            calibration_offset=-12.5,
        ).with_style(line_style=LineStyle.DOTTED, opacity=0.8, show_page_numbers=False)
        self.assertEqual(OverlaySettings.from_dict(settings.to_dict()), settings)

    def test_to_dict_uses_plain_values(self):
        data = OverlaySettings().to_dict()
        self.assertEqual(data["page_size"], "A4")
        self.assertEqual(data["font_family"], "default")
        self.assertEqual(data["break_line_style"], "solid")
        self.assertEqual(data["break_line_color"], "#3b82f6")

    def test_partial_data_merges_over_defaults(self):
        settings = OverlaySettings.from_dict({"margin_top": 10, "page_size": "Letter"})
        self.assertEqual(settings.page.margin_top, 10)
        self.assertEqual(settings.page.page_size, PageSize.LETTER)
        self.assertEqual(settings.page.margin_bottom, 25.4)
        self.assertEqual(settings.style, MarkerStyle())

    def test_invalid_values_fall_back_to_defaults(self):
        with self.assertLogs("breakmark.page_config", level="WARNING"):
            settings = OverlaySettings.from_dict({
                "page_size": "A5",
                "font_size": 0,
                "break_line_color": "blue",
                "break_line_opacity": 1.5,
                "margin_left": 5,
            })
        self.assertEqual(settings.page.page_size, PageSize.A4)
        self.assertEqual(settings.page.font_size, 12.0)
        self.assertEqual(settings.style.line_color, "#3b82f6")
        self.assertEqual(settings.style.opacity, 0.5)
        self.assertEqual(settings.page.margin_left, 5)

    def test_unknown_keys_ignored(self):
        settings = OverlaySettings.from_dict({"theme": "dark"})
        self.assertEqual(settings, OverlaySettings())


class TestValidateSettingValue(unittest.TestCase):

    def test_enums(self):
        self.assertTrue(validate_setting_value("orientation", "landscape"))
        self.assertFalse(validate_setting_value("orientation", "sideways"))
        self.assertFalse(validate_setting_value("font_family", ["serif"]))

    def test_numbers(self):
        self.assertTrue(validate_setting_value("calibration_offset", -40))
        self.assertTrue(validate_setting_value("min_break_spacing", 0))
        self.assertFalse(validate_setting_value("min_break_spacing", -1))
        self.assertFalse(validate_setting_value("line_height", 0))
        self.assertFalse(validate_setting_value("margin_top", True))
        self.assertFalse(validate_setting_value("margin_top", "25"))

    def test_style(self):
        self.assertTrue(validate_setting_value("break_line_color", "#ABCDEF"))
        self.assertFalse(validate_setting_value("break_line_color", "#abc"))
        self.assertTrue(validate_setting_value("show_page_numbers", False))
        self.assertFalse(validate_setting_value("show_page_numbers", 1))
        self.assertTrue(validate_setting_value("break_line_opacity", 0))

    def test_unknown_key_is_valid(self):
        self.assertTrue(validate_setting_value("future_option", object()))
