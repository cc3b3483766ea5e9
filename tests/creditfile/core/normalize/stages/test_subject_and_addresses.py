from creditfile.core.normalize import normalize


def test_subject_names_and_dates_of_birth(make_document, make_section, make_field, make_group):
    raw = make_document(
        [
            make_section(
                "personal_info",
                [
                    make_field("subject_id", "subj-42"),
                    make_field("subject-name", "Jane Smith"),
                    make_field("alias-name", "Jane Doe"),
                    make_field("date-of-birth", "9 July 1986"),
                ],
            ),
            make_section(
                "personal_info",
                [make_field("alias-name", "jane  smith"), make_field("dob", "09/07/1986")],
                source_system="Experian",
            ),
            make_section(
                "tradelines",
                make_group("HSBC - Loan - Ending 1111", dob="not a date"),
                source_system="Experian",
            ),
        ]
    )

    result = normalize(raw)
    credit_file = result.credit_file
    subject = credit_file.subject

    assert credit_file.subject_id == "subj-42"
    assert subject.subject_id == "subj-42"
    assert [(n.full_name, n.name_type) for n in subject.names] == [
        ("Jane Smith", "legal"),
        ("Jane Doe", "alias"),
    ]
    assert [d.dob for d in subject.dates_of_birth] == ["1986-07-09"]
    assert any(w.field == "date_of_birth" and w.raw_value == "not a date" for w in result.warnings)


def test_address_roles_links_and_parsing(make_document, make_section, make_field):
    raw = make_document(
        [
            make_section(
                "addresses",
                [
                    make_field("address", "10 Main Road, Manchester, M1 1AE", table_index=0),
                    make_field("address", "4 Old Lane, Bath, BA1 2AB", table_index=1),
                    make_field("linked-address", "7 New Close, Bristol, BS1 4DJ", table_index=1),
                ],
                source_system="Experian",
            )
        ]
    )

    credit_file = normalize(raw).credit_file

    assert [a.town_city for a in credit_file.addresses] == ["Manchester", "Bath", "Bristol"]
    assert all(a.country_code == "GB" for a in credit_file.addresses)
    roles = {
        (a.address_id, a.role) for a in credit_file.address_associations
    }
    main_road, old_lane, new_close = (a.address_id for a in credit_file.addresses)
    assert roles == {(main_road, "current"), (old_lane, "previous")}
    (link,) = credit_file.address_links
    assert (link.from_address_id, link.to_address_id) == (old_lane, new_close)
    assert link.source_import_id == credit_file.imports[0].import_id


def test_linked_address_also_listed_by_the_same_cra_has_one_association(
    make_document, make_section, make_group
):
    raw = make_document(
        [
            make_section(
                "addresses",
                make_group(
                    "addr-0",
                    address="10 Main Road, Manchester, M1 1AE",
                    heading="Current Address",
                    **{"linked-address": "4 Old Lane, Bath, BA1 2AB"},
                )
                + make_group("addr-1", address="4 Old Lane, Bath, BA1 2AB", heading="Previous Address"),
                source_system="Equifax",
            )
        ]
    )

    credit_file = normalize(raw).credit_file
    main_road, old_lane = (a.address_id for a in credit_file.addresses)
    import_id = credit_file.imports[0].import_id

    assert [
        (a.address_id, a.source_import_id, a.role) for a in credit_file.address_associations
    ] == [(main_road, import_id, "current"), (old_lane, import_id, "previous")]
    (link,) = credit_file.address_links
    assert (link.from_address_id, link.to_address_id) == (main_road, old_lane)


def test_unrecognised_explicit_heading_warns(make_document, make_section, make_group):
    raw = make_document(
        [
            make_section(
                "addresses",
                make_group("a", address="1 Hill Top, Derby, DE1 1AA", heading="Correspondence"),
                source_system="Equifax",
            )
        ]
    )

    result = normalize(raw)

    assert result.credit_file.address_associations[0].role == "current"
    assert any(w.domain == "addresses" and w.raw_value == "Correspondence" for w in result.warnings)


def test_electoral_roll_only_links_known_addresses(make_document, make_section, make_field):
    raw = make_document(
        [
            make_section(
                "addresses",
                [make_field("address", "1 High Street, Leeds, LS1 1AA")],
                source_system="Equifax",
            ),
            make_section(
                "electoral_roll",
                [
                    make_field("electoral-roll", "Added at the address", group_key="er-1"),
                    make_field("address", "1 HIGH STREET, LEEDS, LS1 1AA", group_key="er-1"),
                    make_field("marketing-status", "Opted out", group_key="er-1"),
                    make_field("electoral-roll", "Deleted at the address", group_key="er-2"),
                    make_field("address", "99 Unknown Road, Hull, HU1 1AA", group_key="er-2"),
                    make_field("marketing-status", "Not opted out", group_key="er-2"),
                ],
                source_system="Equifax",
            ),
        ]
    )

    result = normalize(raw)
    credit_file = result.credit_file
    known, unknown = credit_file.electoral_roll_entries

    assert known.address_id == credit_file.addresses[0].address_id
    assert known.change_type == "added"
    assert known.marketing_opt_out is True
    assert unknown.address_id is None
    assert unknown.change_type == "deleted"
    assert unknown.marketing_opt_out is False
    # electoral roll never creates addresses
    assert len(credit_file.addresses) == 1
    notes = [w for w in result.warnings if w.domain == "electoral_roll" and w.field == "address_id"]
    assert len(notes) == 1
    assert notes[0].severity == "info"


def test_marketing_status_that_says_neither_way_is_left_unset(make_document, make_section, make_group):
    statuses = ["Unknown", "None", "Not known", "No", "Opted in"]
    fields = []
    for index, status in enumerate(statuses):
        fields += make_group(f"er-{index}", **{"electoral-roll": "Registered", "marketing-status": status})
    raw = make_document([make_section("electoral_roll", fields, source_system="Equifax")])

    entries = normalize(raw).credit_file.electoral_roll_entries

    assert [e.marketing_opt_out for e in entries] == [None, None, None, True, False]


def test_subject_id_that_is_not_a_valid_id_falls_back(make_document, make_section, make_field):
    raw = make_document(
        [make_section("personal_info", [make_field("subject_id", "Jane Smith 42")])]
    )

    result = normalize(raw, config={"defaultSubjectId": "subj-1"})

    assert result.credit_file.subject_id == "subj-1"
    (warning,) = [w for w in result.warnings if w.field == "subject_id"]
    assert warning.raw_value == "Jane Smith 42"
    assert result.success is True
