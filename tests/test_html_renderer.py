from techpack.html_renderer import export_filename, export_tech_pack, render_cover_sheet_html
from techpack.schema import BomRowModel, TechPackInfoModel, TechPackRecordModel


def test_cover_sheet_layout():
    record = TechPackRecordModel(
        document_title="Dress",
        info=TechPackInfoModel(brand="Acme <Studio>", date="2024.01.01"),
        bom_items=[BomRowModel(label="A", item="Cotton", description="Shell")],
        sketch_image_url="https://example.com/dress.png",
    )

    html = render_cover_sheet_html(record, year=2024)

    assert "TECHPACKS.CO" in html and "COVER SHEET" in html
    assert "Acme &lt;Studio&gt;" in html
    assert "<th>SUPPLIER</th>" in html
    assert html.count("<td class='bom-label'>") == 11
    assert "<td class='bom-label'>K</td>" in html
    assert html.count("background:#f9f9f9") == 5
    assert "src='https://example.com/dress.png'" in html
    assert "COPYRIGHT OF Acme &lt;Studio&gt; 2024. THIS DESIGN IS THE PROPERTY OF Acme &lt;Studio&gt;" in html


def test_export_tech_pack_uses_recovered_title():
    export = export_tech_pack("# Summer Dress\n\n## Brand\nNike\n")
    assert export.filename == "Summer_Dress_TechPack.html"
    assert export.record.info.brand == "Nike"
    assert "Nike" in export.html


def test_export_filename_fallback():
    assert export_filename("") == "Document_TechPack.html"
