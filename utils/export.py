"""
utils/export.py — Excel habitat report using openpyxl.

Generates an .xlsx with two sheets:
- Habitats: one row per plant with its accepted vivarium types, minimum
  enclosure size and one score column per habitat profile.
- Ranges: the standardized ranges of every plant (min-max, ideal).

Plants that cannot be read are listed on the Habitats sheet with the error
in the Notes column.
"""

from datetime import datetime
from io import BytesIO

from openpyxl.styles import Font, PatternFill, Alignment, Border, Side
from openpyxl.utils import get_column_letter

from enclosure_size import determine_minimum_enclosure_size
from habitat_profiles import HABITAT_PROFILES, PROFILES_BY_NAME
from habitat_scorer import ACCEPT_THRESHOLD, FALLBACK_THRESHOLD, calculate_habitat_fit
from models import RANGE_KEYS
from plant_store import load_all_plants, plant_id


# Fill per habitat type tag, used for the "Top habitat" cell
TYPE_FILLS = {
    'terrarium': PatternFill(start_color='4CAF50', end_color='4CAF50', fill_type='solid'),
    'paludarium': PatternFill(start_color='00897B', end_color='00897B', fill_type='solid'),
    'aerarium': PatternFill(start_color='7B1FA2', end_color='7B1FA2', fill_type='solid'),
    'desertarium': PatternFill(start_color='FFB300', end_color='FFB300', fill_type='solid'),
    'aquarium': PatternFill(start_color='1E88E5', end_color='1E88E5', fill_type='solid'),
    'riparium': PatternFill(start_color='26A69A', end_color='26A69A', fill_type='solid'),
    'house-plant': PatternFill(start_color='8D6E63', end_color='8D6E63', fill_type='solid'),
}

# Score cell fills: accepted / fallback band
ACCEPT_FILL = PatternFill(start_color='C8E6C9', end_color='C8E6C9', fill_type='solid')
FALLBACK_FILL = PatternFill(start_color='FFF9C4', end_color='FFF9C4', fill_type='solid')

HEADER_FONT = Font(name='Calibri', bold=True, color='FFFFFF', size=11)
HEADER_FILL = PatternFill(start_color='1565C0', end_color='1565C0', fill_type='solid')
HEADER_ALIGNMENT = Alignment(horizontal='center', vertical='center', wrap_text=True)
HEADER_BORDER = Border(
    bottom=Side(style='thin', color='0D47A1'),
    right=Side(style='thin', color='E2E8F0'),
)
CELL_BORDER = Border(
    bottom=Side(style='thin', color='E2E8F0'),
    right=Side(style='thin', color='E2E8F0'),
)

HABITAT_COLUMNS = ['ID', 'Name', 'Scientific name', 'Top habitat', 'Vivarium types', 'Enclosure', 'Notes']
RANGE_COLUMNS = ['ID', 'Name', 'Substrate', 'Special needs']


def _write_header(ws, columns):
    for col_idx, col_name in enumerate(columns, 1):
        cell = ws.cell(row=1, column=col_idx, value=col_name)
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL
        cell.alignment = HEADER_ALIGNMENT
        cell.border = HEADER_BORDER
    ws.freeze_panes = 'A2'


def _write_row(ws, row_idx, values):
    for col_idx, value in enumerate(values, 1):
        ws.cell(row=row_idx, column=col_idx, value=value).border = CELL_BORDER


def _format_range(data):
    if not data:
        return ''
    return f"{data['min']}-{data['max']} ({data['ideal']})"


def _build_habitat_sheet(ws, entries, profiles):
    """Populate the Habitats sheet. entries: list of (id, plant, fit, error)."""
    profile_names = [profile.name for profile in profiles]
    _write_header(ws, HABITAT_COLUMNS + profile_names)
    first_score_col = len(HABITAT_COLUMNS) + 1

    for row_idx, (pid, plant, fit, error) in enumerate(entries, 2):
        if error:
            _write_row(ws, row_idx, [pid, '', '', '', '', '', error])
            continue

        results = fit['results']
        enclosure = determine_minimum_enclosure_size(plant)
        _write_row(ws, row_idx, [
            pid,
            plant.get('name', ''),
            plant.get('scientificName', ''),
            results[0] if results else '',
            ', '.join(results),
            enclosure['size'],
            fit.get('error') or '',
        ])

        top = PROFILES_BY_NAME.get(results[0]) if results else None
        if top is not None and top.type_tag in TYPE_FILLS:
            top_cell = ws.cell(row=row_idx, column=4)
            top_cell.fill = TYPE_FILLS[top.type_tag]
            top_cell.font = Font(color='FFFFFF', bold=True)

        for offset, name in enumerate(profile_names):
            score = fit['scores'].get(name)
            cell = ws.cell(row=row_idx, column=first_score_col + offset, value=score)
            cell.border = CELL_BORDER
            cell.number_format = '0.0'
            if score is None:
                continue
            if score >= ACCEPT_THRESHOLD:
                cell.fill = ACCEPT_FILL
            elif score >= FALLBACK_THRESHOLD:
                cell.fill = FALLBACK_FILL

    ws.column_dimensions['A'].width = 22
    ws.column_dimensions['B'].width = 24
    ws.column_dimensions['C'].width = 28
    ws.column_dimensions['D'].width = 18
    ws.column_dimensions['E'].width = 32
    ws.column_dimensions['F'].width = 12
    ws.column_dimensions['G'].width = 30
    for offset in range(len(profile_names)):
        ws.column_dimensions[get_column_letter(first_score_col + offset)].width = 14


def _build_ranges_sheet(ws, entries):
    """Populate the Ranges sheet from the mapped ranges of each readable plant."""
    range_keys = list(RANGE_KEYS.values())
    _write_header(ws, RANGE_COLUMNS + range_keys)

    row_idx = 2
    for pid, plant, fit, error in entries:
        if error:
            continue
        ranges = fit.get('ranges', {})
        _write_row(ws, row_idx, [
            pid,
            plant.get('name', ''),
            ranges.get('substrateType', ''),
            ranges.get('specialNeeds', ''),
        ] + [_format_range(ranges.get(key)) for key in range_keys])
        row_idx += 1

    ws.column_dimensions['A'].width = 22
    ws.column_dimensions['B'].width = 24
    ws.column_dimensions['C'].width = 12
    ws.column_dimensions['D'].width = 14
    for offset in range(len(range_keys)):
        ws.column_dimensions[get_column_letter(len(RANGE_COLUMNS) + 1 + offset)].width = 18


def generate_habitat_report(plants_dir=None, profiles=HABITAT_PROFILES):
    """Generate the habitat report workbook for every plant in the directory.

    Returns:
        (BytesIO buffer, filename) on success, (None, None) if there are no plants.
    """
    import openpyxl

    plants, errors = load_all_plants(plants_dir)
    if not plants and not errors:
        return None, None

    entries = [
        (plant_id(path, plant), plant, calculate_habitat_fit(plant, profiles), None)
        for path, plant in plants
    ]
    entries.extend((item['file'], {}, None, item['error']) for item in errors)

    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = 'Habitats'
    _build_habitat_sheet(ws, entries, profiles)
    _build_ranges_sheet(wb.create_sheet(title='Ranges'), entries)

    buffer = BytesIO()
    wb.save(buffer)
    buffer.seek(0)

    filename = f"habitat_report_{datetime.now().strftime('%Y%m%d')}.xlsx"
    return buffer, filename
