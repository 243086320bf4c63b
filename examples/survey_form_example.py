"""Minimal example: name form fields, then rebuild a two-step survey submission."""

from form_paths import Accumulator, encode, extract, name_of, paths_for


def main() -> None:
    """Render field names and fold two form steps into one record."""
    p = paths_for()
    framework = p.favouriteFrameworks(0)
    print("name field:", name_of(framework.name))
    print("score field:", encode(framework.satisfaction, "number"))
    print("tag field:", name_of(p.tags()))

    accumulator = Accumulator()
    step1 = extract(
        [
            (name_of(p.settings.mode), "dark"),
            (name_of(framework.name), "Go"),
            (encode(framework.satisfaction, "number"), "9"),
            (name_of(p.tags()), "backend"),
            (name_of(p.tags()), "cli"),
        ],
        accumulator=accumulator,
    )
    print("after step 1:", step1.combined)

    step2 = extract(
        [
            (name_of(p.profile.firstname), "Ada"),
            (encode(p.profile.newsletter, "boolean"), "on"),
            (encode(p.profile.age, "number"), "not a number"),
            (name_of(p.profile.avatar), b"\x89PNG..."),
        ],
        accumulator=accumulator,
    )
    print("fields:", step2.fields)
    print("files:", step2.files)
    for issue in step2.issues:
        print(f"skipped {issue.key}: {issue.error}")


if __name__ == "__main__":
    main()
