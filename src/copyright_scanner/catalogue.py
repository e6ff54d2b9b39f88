"""Named catalogue of well-known licenses and copyright owners.

Each ``Rule`` bundles owner patterns, license patterns and exclusion
patterns written in the simplified pattern language of
:mod:`copyright_scanner.patterns`. A rule set refers to entries by name
(``"APACHE2"``, ``"MIT"`` ...) and decides per project whether a name is
first party, third party or forbidden.

Exclusions are plain regular expressions searched in normalized match text;
they drop findings that would otherwise be misattributed (``Affero`` inside
the GPL 3.0 text, for example).
"""
from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType

from rapidfuzz.distance import Levenshtein

from copyright_scanner.patterns import CLOSE_QUOTE, OPEN_QUOTE, any_word_expr


@dataclass(frozen=True, slots=True)
class Rule:
    """Owner, license and exclusion patterns for one catalogue entry."""

    owners: tuple[str, ...] = ()
    licenses: tuple[str, ...] = ()
    exclusions: tuple[str, ...] = ()


class UnknownRuleError(LookupError):
    """Raised by ``lookup_rule`` for a name that is not in the catalogue."""

    def __init__(self, name: str, suggestions: tuple[str, ...], message: str) -> None:
        super().__init__(message)
        self.name = name
        self.suggestions = suggestions


def _license(*licenses: str, exclusions: tuple[str, ...] = ()) -> Rule:
    return Rule(licenses=licenses, exclusions=exclusions)


def _owner(*owners: str) -> Rule:
    return Rule(owners=owners)


# Shared fragments.
_GNU = r"[\[]?GNU[\]]?"
_NOT_A_CONTRIBUTION_OWNER = (
    f"owner as {OPEN_QUOTE}?Not a Contribution[.,;:]{{0,3}}{CLOSE_QUOTE}?"
)
_GPL_EXCLUSIONS = (
    f"See the {_GNU} General Public Licen[cs]e for more details[,.;:]?",
    "In addition to the permissions in the GNU General Public License[,.;:]?",
)
_AFFERO_MENTIONS = (
    "Use with the GNU Affero General Public License[.]?",
    "link or combine any covered work with a work licensed under version 3 of the GNU"
    " Affero General Public License into a single combined work[,.;:]?",
    "but the special requirements of the GNU Affero General Public License,?",
    "means either the GNU General Public License,?"
    " Version 2[.]0,? the GNU Lesser General Public License,?"
    " Version 2[.]1,? the GNU Affero General Public License,?",
)

# ── Licenses A-F ────────────────────────────────────────────────────────

AFL2_1 = _license(
    ".*SPDX-License-Identifier: AFL-2[.]1",
    "<license> <name> ?AFL-2[.]1 ?</name>.*",
    "Academic Free License 2[.]1",
)

AFL3_0 = _license(
    ".*SPDX-License-Identifier: AFL-3[.]0",
    "<license> <name> ?AFL-3[.]0 ?</name>.*",
    "Academic Free Licen[cs]e 3[.]0",
)

# "Affero" appears in the GPL 3.0 and MPL texts; those mentions are
# matched first and then excluded.
AGPL = _license(*_AFFERO_MENTIONS, "Affero", exclusions=_AFFERO_MENTIONS)

ANDROID = Rule(
    owners=(
        "Android(?:-x86)? Open(?: |-)Source Project",
        "LK Trusty Authors",
    ),
    licenses=("Android Software Development Kit Licen[cs]e Agreement",),
)

APACHE1_1 = _license(
    ".*SPDX-License-Identifier: Apache-1[.]1?",
    "<license> <name> ?Apache(?: Software)?(?: Public)?(?: Licen[cs]e)?,?"
    "(?: |-)1[.]1 ?</name>.*",
    "<license> <name> ?(?:The )?Apache(?: Software)?(?: Public)?"
    " Licen[cs]e,? Version 1[.]1 ?</name>.*",
    "http://www[.]apache[.]org/licenses/LICENSE-1[.]1",
    "(?:the )?Apache 1[.]1 Licen[cs]e",
    ".*Licen[cs]ed under (?:both )?(?:the )?Apache Licen[cs]e,? version 1[.]1",
    ".+Licen[cs]ed under (?:both )?(?:the )?Apache Licen[cs]e v1[.]1",
    ".+licen[cs]ed under (?:the )?Apache 1[.]1",
    "(?:the )?Apache(?: Software)?(?: Public)? Licen[cs]e,? Version 1[.]1",
    "(?:the )?Apache(?: Software)?(?: Public)? Licen[cs]e,? v1[.]1",
    "^terms of the Apache 1[.]1 licen[cs]e",
)

APACHE2 = Rule(
    owners=(
        "(?:by )?(?:The )?Apache Software Foundation.?",
        "Apache Software Foundation.?"
        " This product includes software developed"
        " (?:by|at) The Apache Software Foundation",
    ),
    licenses=(
        ".*SPDX-License-Identifier: Apache-2[.]?[0]?",
        "<license> <name> ?Apache(?: Software)?(?: Public)?(?: Licen[cs]e)?,?"
        "(?: |-)2[.]?[0]? ?</name>.*",
        "<license> <name> ?(?:The )?Apache(?: Software)?(?: Public)?"
        " Licen[cs]e,? Version 2[.]?[0]? ?</name>.*",
        "https?://www[.]apache[.]org/licenses/LICENSE-2[.]0",
        "Apache 2[.]?[0]? Licen[cs]e",
        ".*Licen[cs]ed under (?:both )?(?:the )?Apache Licen[cs]e,?(?: version 2[.]?0?)?",
        r".+Licen[cs]ed under (?:both )?(?:the )?Apache Licen[cs]e v2[.]?(?:[^\W_]{1,30})?",
        ".+licen[cs]ed under (?:the )?Apache 2[.]?",
        ".+licen[cs]es this file to you under (?:the )?Apache Licen[cs]e,?",
        "Apache(?: Software)?(?: Public)? Licen[cs]e,? Version 2[.]?[0]?",
        "^apache2(?:-android)?",
        "^the apache licen[cs]e",
        "^terms of the Apache 2[.]?[0]? licen[cs]e",
        ".+under the terms of (?:either )?the Apache Licen[cs]e[,.;]?",
    ),
    exclusions=(_NOT_A_CONTRIBUTION_OWNER,),
)

ARTISTIC_LICENSE = _license(
    ".*SPDX-License-Identifier: Artistic-[12][.]?[0]?",
    "<license> <name> ?Artistic-[12][.]?[0]? ?</name>.*",
    f"(?:The )?{OPEN_QUOTE}?Artistic Licen[cs]e{CLOSE_QUOTE}?(?: [12][.]?[0]?)?",
)

BEER_WARE = _license(r"\bTHE BEER-WARE LICEN[CS]E")

BSD = _license(
    r"<license> <name> ?BSD \d-clause(?: License)? ?</name>.*",
    "<license> <name> ?BSD(?: |-)style(?: License)? ?</name>.*",
    "<license> <name> ?(?:New )?BSD(?: New)?(?: Licen[cs]e)? ?</name>.*",
    "<license> <name> ?Berkeley Software Distribution [(]BSD[)] Licen[cs]e ?</name>.*",
    ".*SPDX-License-Identifier: BSD-2-Clause",
    ".*SPDX-License-Identifier: BSD-2-Clause-FreeBSD",
    ".*SPDX-License-Identifier: BSD-3-Clause",
    ".*SPDX-License-Identifier: BSD-4-Clause",
    "^BSD(?:[.]|, see LICEN[CS]E for (?:more )?details[.])?",
    ".*under the terms and conditions of the BSD Licen[cs]e.*",
    r".*(?:\d-clause |a )?BSD (?:\d-clause )?licen[cs]e.*",
    ".*Redistribution and use in source and binary forms,? with or without modification,?"
    " are permitted provided that the following conditions are met[:]?",
    ".*This header is BSD licen[cs]ed so anyone can use the definitions to implement"
    " compatible drivers servers[.:]?.*",
    ".*Redistribution and use is allowed according to the terms of the"
    r" (?:\d-clause )?BSD licen[cs]e[.:]?.*",
    r".*(?:[-\w] )?redistributions (?:of|in) source code must retain the"
    " (?:(?:above|accompanying) )?copyright notice(?: unmodified)?[,.:;]? this list"
    " of conditions[,.;:]? and the following disclaimers?[,.;:]?"
    r" (?:[-\w] )?redistributions (?:in|of) binary form must reproduce the"
    " (?:above|accompanying) copyright notice[,.;:]? this list of conditions[,.:;]?"
    " and the following disclaimer in the documentation[,.;:]? and(?: |[/])or other"
    " materials(?: provided with the distribution)?[,.:;]{0,3}",
)

BSL1_0 = _license(
    ".*SPDX-License-Identifier: BSL-1[.]?0?",
    "<license> <name> ?Boost(?:,? Version 1[.]?0?)? ?</name>.*",
    "<license> <name> ?Boost Software License(?:,? Version 1[.]?0?)? ?</name>.*",
    "<license> <name> ?BSL-1[.]?0? ?</name>.*",
    "https?://www[.]boost[.]org/LICENSE_1_0[.]txt(?: [(]?Boost license[)]?)?",
    "Boost Software License 1[.]?0?.*",
    ".*(?:The )?Boost Software License(?:,| ?-)?(?: Version 1[.]?0?)?",
)

CC0 = _license(
    "<license> <name> ?CC0 ?</name>.*",
    r"https?://[\w.]{0,30}creativecommons[.]org/publicdomain/zero(?:/[\d.]{0,30})?",
    "To the extent possible under law[,;:]? the person who associated CC0 with this code"
    " has waived all copyright and related or neighboring rights to this code[.]?",
    "To the greatest extent permitted by,? but not in contravention of,? applicable law,?"
    " Affirmer hereby overtly,? fully,? permanently,? irrevocably and"
    " unconditionally waives,? abandons,? and surrenders all of Affirmer'?s"
    " Copyright and Related Rights and associated claims and causes of action,?"
    " whether (?:now )?known or unknown",
    "Affirmer hereby grants to each affected person a royalty-?free,?"
    " non(?: |-)?transferable,? non(?: |-)?sublicensable,? non(?: |-)?exclusive,?"
    " irrevocable,? and unconditional license to exercise Affirmer'?s Copyright"
    " and Related Rights in the Work",
)

CC_BY_C = _license(
    r"\bhttps?://[\w.]{0,30}creativecommons[.]org/licen[cs]es/by[-\w.]{0,60}",
    r"(?-i:\bAttribution(?:-(?:Share ?Alike|NoDerivs)){0,2} )",
)

CC_BY_NC = _license(
    r"\bhttps?://[\w.]{0,30}creativecommons[.]org/licenses/by"
    r"(?:-nd)?(?:-sa)?-nc[-/\w.]{0,60}",
    r"\bAttribution(?:-NoDerivs)?(?:-Share ?Alike)?"
    "-NonCommercial(?:-NoDerivs)?(?:-Share ?Alike)?",
)

CLANG_LLVM = _license(
    "This file is dual licensed under the MIT and the University of Illinois Open"
    " Source Licenses[,.;:]?",
    "to deal with the Software without restriction,? including without limitation",
)

COMMONS_CLAUSE = _license(r"\bCommons Clause")

CPAL = _license(r"\bCommon Public Attribution Licen[cs]e")

EDL = _license(
    "https?://www[.]eclipse[.]org/org/documents/edl-v10[.]php",
    "Eclipse Distribution Licen[cs]e(?: -)? v? ?1[.]0",
)

EPL = _license(
    "<license> <name> ?Eclipse Public Licen[cs]e"
    "(?: -)?(?: (?:v ?|version )?1[.]?[0]?)? ?</name>.*",
    "^Eclipse Public Licen[cs]e[.]?",
    ".*under (?:(?:the|this) )?(?:terms of )?(?:the )?eclipse"
    " (?:public )?licen[cs]e[,.;:]?.*",
    ".*terms of (?:(?:the|this) )?eclipse public licen[cs]e[,.;:]?.*",
)

EUPL = _license(" [(]?EUPL[)]? ")

# Placeholder owners used by tests and samples, like example.com.
EXAMPLES = _owner("Your Company[.]?")

FTL = Rule(
    owners=("The FreeType Project(?: [(]?www[.]freetype[.]org[)]?)?[,;:.]?",),
    licenses=(
        ".*SPDX-License-Identifier: FTL",
        "<license> <name> ?(?:The )?Freetype Project ?</name>.*",
        "<license> <name> ?FTL ?</name>.*",
        "This license was inspired by the BSD,? Artistic,? and IJG [(]?Independent JPEG"
        " Group[)]? licenses,? which all encourage inclusion and use of free software"
        " in commercial and freeware products alike[,;:.]?",
        "you must acknowledge somewhere in your documentation that you have used the FreeType"
        " code[.;:]?",
        "The FreeType Project LICENSE",
        "The FreeType Project is distributed in several archive packages[,;.:]?",
        "This file is part of the FreeType project,? and may only be used,? modified,? and"
        " distributed under the terms of the FreeType project license[,.;:]?",
    ),
)

# ── Licenses G-N ────────────────────────────────────────────────────────

GOOGLE = _owner("Google,? Inc[.]?", "Google LLC")

GPL = _license(
    r"\bIn addition to the permissions in the GNU General Public License[,.;:]?",
    f"See the {_GNU} General Public Licen[cs]e for more details[,.;:]?",
    r"\bGNU General Public Licen[cs]e",
    ".*gnu (?:library|lesser) general public licen[cs]e.*",
    exclusions=_GPL_EXCLUSIONS,
)

GPL2 = _license(
    "<license> <name> ?GNU General Public License, Version 2 ?</name>.*",
    "<license> <name> ?The GPLv2 License ?</name>.*",
    "<license> <name> ?GPLv2 ?</name>.*",
    ".*SPDX-License-Identifier: GPL-2[.]0[+]?",
    ".*SPDX-License-Identifier: GPL-2[.]0-only",
    ".*SPDX-License-Identifier: GPL-2[.]0-or-later",
    f".*{_GNU} GPL[,;]? version 2[,.;:]?.*",
    f".*{_GNU} General Public Licen[cs]e[,;]? version 2[,.;:]?.*",
    f"See the {_GNU} General Public Licen[cs]e for more details[,.;:]?",
    f"You should have received a copy of the {_GNU} General Public Licen[cs]e",
    f".*{_GNU} General Public Licen[cs]e as published by the Free Software"
    " Foundation?(?:[']s)?[,.;:]? (?:either )?version 2.*",
    exclusions=_GPL_EXCLUSIONS,
)

GPL3 = _license(
    "<license> <name> ?GPLv3 ?</name>.*",
    ".*SPDX-License-Identifier: GPL-3[.]0[+]?",
    f".*{_GNU} GPL[,;]? version 3[,.;:]?.*",
    f".*{_GNU} General Public Licen[cs]e[,;]? version 3[,.;:]?.*",
    f"See the {_GNU} General Public Licen[cs]e for more details[,.;:]?",
    f"You should have received a copy of the {_GNU} General Public Licen[cs]e",
    f".*{_GNU} General Public Licen[cs]e as published by the Free Software"
    " Foundation?(?:[']s)?[,.;:]? (?:either )?version 3.*",
    exclusions=_GPL_EXCLUSIONS,
)

ISC = _license(
    "<license> <name> ?(?:The )?ISC(?: Licen[cs]e)? ?</name>.*",
    ".*SPDX-License-Identifier: ISC",
    "https?://(?:www[.])?spdx[.]org/licenses/ISC",
    "(?:The )?ISC Licen[cs]e",
    "Files that are completely new have a Google copyright and an ISC license[,;:.]?",
    "ISC license used for completely new code in BoringSSL[,.;:]?",
    "this file is available under an ISC license[,;:.]?",
    "ISC",
)

JSON = _license("The Software shall be used for Good,? not Evil[.]?")

LGPL = _license(
    "<license> <name> ?GNU (?:Lesser|Library) General Public License ?</name>.*",
    ".*SPDX-License-Identifier: LGPL.*",
    ".*LGPL.*",
    ".*gnu (?:library|lesser) general public licen[cs]e.*",
)

LIBTIFF = _license(
    "<license> <name> ?libtiff(?: license)? ?</name>.*",
    ".*SPDX-License-Identifier: libtiff",
    "https?://(?:www[.])?fedoraproject[.]org/wiki/Licensing/libtiff",
    "Permission to use,? copy,? modify,? distribute,? and sell this software and its"
    " documentation for any purpose is hereby granted without fee,? provided that"
    " [(]i[)] the above copyright notices and this permission notice appear in all"
    " copies of the software and related documentation,? and [(]ii[)] the names of"
    " Sam Leffler and Silicon Graphics may not be used in any advertising",
)

LPL1_02 = _license(
    "<license> <name> ?LPL-1[.]02 ?</name>.*",
    ".*SPDX-License-Identifier: LPL-1[.]02",
    "https?://plan9[.]bell-labs[.]com/plan9dist/license[.]html",
    "https?://(?:www[.])?opensource[.]org/licenses/LPL-1[.]02",
    "This software is (?:also )?made available under the Lucent Public License,? version"
    " 1[.]02",
    "Lucent Public License,? version 1[.]02",
    "Lucent Public License v1[.]02",
)

MIT = _license(
    "<license> <name> ?(?:The )?MIT Licen[cs]e(?: [(]MIT[)])? ?</name>.*",
    "<license> <name> ?MIT ?</name>.*",
    ".*SPDX-License-Identifier: MIT",
    "http://www[.]opensource[.]org/licenses/mit-license[.]php",
    "^the mit licen[cs]e(?:[:] http://www[.]opensource[.]org/licenses/mit-license[.]php)?",
    "^MIT licen[cs]e[,.;:]? http://www[.]ibiblio[.]org/pub/Linux/LICENSE",
    ".*under (?:(?:the|this) )?(?:terms of )?(?:the )?mit"
    " (?:open source )?licen[cs]e[,.;:]?.*",
    ".*MIT licen[cs]ed",
    ".*terms of (?:(?:the|this) )?mit licen[cs]e[,.;:]?.*",
    ".*this code is licen[cs]ed under the mit licen[cs]e[,;.:]?.*",
    ".*the mit or psf open source licen[cs]es[,.]?.*",
    ".*Dual licen[cs]ed under the MIT or.*",
    ".*Use of this software is governed by the MIT licen[cs]e[,.;:]?.*",
    ".*This library is free software[,.;:]? you can redistribute it and or modify it"
    " under the terms of the MIT licen[cs]e[,.;:]?.*",
    ".*may be distributed under the MIT or PSF open source licen[cs]es[,.;:]?.*",
    ".*permission is (?:hereby )?granted[,;]? free of charge[,;]? to any person.*",
    "(?:the mit licen[cs]e )?permission is (?:hereby )?granted[,;]? free of charge[,;]?"
    " to any person obtaining a copy of this software and associated documentation"
    f" files [(]?the {OPEN_QUOTE}?software{CLOSE_QUOTE}[)]?[,;]? to deal (?:in|with) the"
    " software without restriction[,;.:]? including without limitation the rights"
    " to use[,;]? copy[,;]? modify[,;]? merge[,;]? publish[,;]? distribute[,;]?"
    " sublicense[,;]? and(?: |[/])or sell copies of the software[,;]? and to permit"
    " persons to whom the software is furnished to do so[,;.:]? subject to the"
    " following conditions[,;.:]? the above copyright notice[,;]? and this"
    " permission notice shall be included in all copies[,;]? or substantial"
    " portions of the software[,;.:]?",
    ".*permission to use[,;]? copy[,;]? modify[,;]? (?:and )?distribute"
    " (?:and sell )?this software (?:and its documentation )?(?:for any purpose )?"
    "(?:(?:and|with or) without fee )?is (?:hereby )?granted[,;]?"
    " (?:without fee )?provided that the above copyright notice.*",
    ".*I hereby give permission[,;]? free of charge[,;]? to copy[,;]? modify[,;]? and"
    " redistribute this software[,;]? in source or binary form[,;]? provided that"
    " the above copyright notice and the following disclaimer are included.*",
)

MSPL = _license(
    "<license> <name> ?(?:The )?Microsoft Public Licen[cs]e ?</name>.*",
    "<license> <name> ?MS-PL ?</name>.*",
    ".*SPDX-License-Identifier: MS-PL",
)

NCSA = _license(
    "<license> <name> ?NCSA ?</name>.*",
    ".*SPDX-License-Identifier: NCSA",
    "https?://otm[.]illinois[.]edu/uiuc_openSource",
    "https?://(?:www[.])?opensource[.]org/licenses/NCSA",
    "University of Illinois[/]NCSA Open Source Licen[cs]e",
    "University of Illinois NCSA Open Source Licen[cs]e",
    "Redistributions of source code must retain the above copyright notice,? this list of"
    " conditions and the following disclaimers[,;:.]?",
)

NON_COMMERCIAL = _license(r"\bNON-?COMMERCIAL LICEN[CS]E")

# Two leading words keep stray "not a contribution" phrases from matching.
NOT_A_CONTRIBUTION = _license(
    f".*(?:{any_word_expr()} ){{2}}{OPEN_QUOTE}?"
    f"Not a Contribution[.,;:]{{0,3}}{CLOSE_QUOTE}?.*",
    exclusions=(_NOT_A_CONTRIBUTION_OWNER,),
)

# ── Licenses O-Z ────────────────────────────────────────────────────────

OPENSSL = Rule(
    owners=("The OpenSSL Project[,.;:]?",),
    licenses=(
        "<license> <name> ?OpenSSL ?</name>.*",
        ".*SPDX-License-Identifier: OpenSSL",
        "https?://(?:www[.])?openssl[.]org/source/license[.]html",
        "Licensed under the OpenSSL license"
        f"(?: [(]?the {OPEN_QUOTE}?License{CLOSE_QUOTE}?[)]?)?[,.;:]?",
        f"{OPEN_QUOTE}?This product includes software developed by the OpenSSL Project"
        " for use in the OpenSSL Toolkit[,;:.]?"
        f"(?: [(]?https?://(?:www[.])?openssl[.]org(?:/| )?[)]?{CLOSE_QUOTE}?)?",
        f"The names {OPEN_QUOTE}?OpenSSL Toolkit{CLOSE_QUOTE}? and"
        f" {OPEN_QUOTE}?OpenSSL Project{CLOSE_QUOTE}? must"
        " not be used to endorse or promote",
        "Original SSLeay License",
        "OpenSSL License",
    ),
)

PSF = _owner("Python Software Foundation")

PSFL = _license(
    "(?:The )?PSF Licen[cs]e",
    r".*Python Software Foundation license(?: version \d)?[,.;:]?.*",
    ".*Permission to use[,;]? copy[,;]? modify[,;]? and distribute this Python software"
    " and its associated documentation for any purpose.*",
)

SISSL = _license(r"\bSun Industry Standards Source Licen[cs]e")

SSPL = _license(
    ".*Server Side Public Licen[cs]e.*",
    ".*SPDX-License-Identifier: SSPL-1[.]0",
    f"{OPEN_QUOTE}?This License{CLOSE_QUOTE}? refers to (?:the )?Server Side Public"
    " License[,;:.]?",
    "If you make the functionality of the Program (?:or a modified version )?available to"
    " third parties as a service,? you must make the Service Source Code available",
    f"{OPEN_QUOTE}?Service Source Code{CLOSE_QUOTE}? means the Corresponding Source for"
    " the Program(?: or the modified version)?,? and the Corresponding Source for all"
    " programs that you use to make the Program",
    "(?:https?://)?(?:www[.])?mongodb[.]com/licensing/server-side-public-license",
    r"SSPL-\d[.]?\d?",
    "This program is free software[,.;:]? you can redistribute it and/or modify it under"
    " the terms of the Server Side Public License.*",
    "You must comply with the Server Side Public License in all respects",
)

UNICODE = _license(
    r".*SPDX-License-Identifier: Unicode-DFS-\d{4}",
    ".*SPDX-License-Identifier: Unicode-TOU",
    "https?://(?:www[.])?unicode[.]org/copyright[.]html",
    "UNICODE,? INC[.]? LICENSE AGREEMENT(?: -)? DATA FILES AND SOFTWARE",
    "Permission is hereby granted,? free of charge,? to any person obtaining a copy of"
    " the Unicode data files and any associated documentation",
    "Certain documents and files on this website contain a legend indicating that"
    f" {OPEN_QUOTE}?Modification is permitted[,;:.]?{CLOSE_QUOTE}?",
    f"the particular set of data files known as the {OPEN_QUOTE}?Unicode Character"
    f" Database{CLOSE_QUOTE}? can be found in",
    "Each version of the Unicode Standard has further specifications of rights and"
    " restrictions of use[,;:.]?",
    r"Unicode License Agreement(?: -)? Data Files and Software(?: [(]?\d{4}[)]?)?",
    "Unicode Terms of Use",
)

UNLICENSE = _license(
    ".*SPDX-License-Identifier: Unlicen[cs]e",
    "<license> <name> ?Unlicen[cs]e ?</name>.*",
    "This is free and unencumbered software released into the public domain[,;:.]?",
    "the author (?:or authors )?of this software dedicate any and all copyright interest"
    " in the software to the public domain[,;:.]?",
    "(?:https?://)?(?:www[.])?unlicen[cs]e[.]org(?:/UNLICEN[CS]E)?",
)

UPL = _license(
    "<license> <name> ?UPL(?:-1[.]0)? ?</name>.*",
    ".*SPDX-License-Identifier: UPL-1[.]0",
    "Universal Permissive License v1[.]0",
    "The above copyright notice and either this complete permission notice or at a"
    " minimum a reference to the UPL must be included in all copies",
    "The Universal Permissive License(?: [(]?UPL[)]?)?,?(?: Version 1[.]0)?",
)

W3C = Rule(
    owners=(
        "World Wide Web Consortium[,.;:]?",
        "Massachusetts Institute of Technology,? European Research Consortium for"
        " Informatics and Mathematics, Keio University",
    ),
    licenses=(
        ".*SPDX-License-Identifier: W3C(?:-(?:19980720|20021231|20150513))?",
        "<license> <name> ? W3C(?:-(?:19980720|20021231|20150513))? ?</name>.*",
        "https?://(?:www[.])?opensource[.]org/licenses/W3C",
        "https?://(?:www[.])?w3[.]org/Consortium/Legal/copyright-software-19980720[.]html",
        "https?://(?:www[.])?w3[.]org/Consortium/Legal/2002"
        "/copyright-software-20021231[.]html",
        "https?://(?:www[.])?w3[.]org/Consortium/Legal/2015/copyright-software-and-document",
        "If none exist,? a short notice of the following form",
        "If none exist,? the W3C Software Short Notice should be included",
        "If none exist,? the W3C Software and Document Short Notice should be included[.]?",
        "W3C(?:®|[(]R[)])? SOFTWARE (?:NOTICE AND )?LICEN[CS]E"
        "(?: [(]?(?:1998-07-20|2002-12-31|2015-05-13)[)]?)?",
    ),
)

WATCOM = _license(
    ".*SPDX-License-Identifier: Watcom-1[.]0",
    ".*Sybase Open Watcom Public License.*",
    ".*automatically without notice if You[,;]? at any time during the term of this"
    " Licen[cs]e[,;]? commence an action for patent infringement [(]?including as a"
    " cross claim or counterclaim[)]?.*",
)

WTFPL = _license(
    "<license> <name> ?WTFPL ?</name>.*",
    ".*SPDX-License-Identifier: WTFPL",
    r"\bDo What The F.ck You Want To Public Licen[cs]e",
)

XNET = _license(
    "<license> <name> ?X[.]Net(?: Licen[cs]e)? ?</name>.*",
    "<license> <name> ?Xnet ?</name>.*",
    ".*SPDX-License-Identifier: Xnet",
    "https?://(?:www[.])?opensource[.]org/licenses/Xnet",
    "X[.]Net Licen[cs]e",
)

ZEND = _license(
    "<license> <name> ?Zend(?: Engine)? License(?: (?:v|version )2[.]00?)? ?</name>.*",
    "<license> <name> ?Zend(?:-2[.]00?)? ?</name>.*",
    ".*SPDX-License-Identifier: Zend-2[.]0",
    "https?://(?:www[.])?zend[.]com/license/2_00[.]txt",
    "Zend (?:Engine )?License,? v2[.]00?",
    "The Zend Engine License,? version 2[.]00?",
)

ZLIB = _license(
    "<license> <name> ?zlib Licen[cs]e ?</name>.*",
    "<license> <name> ?zlib/libpng Licen[cs]e(?: with Acknowledgement)? ?</name>.*",
    ".*SPDX-License-Identifier: Zlib",
    ".*SPDX-License-Identifier: zlib-acknowledgement",
    "https?://(?:www[.])?opensource[.]org/licenses/zlib-license[.]php",
    "https?://(?:www[.])?zlib[.]net/zlib_license[.]html",
    "https?://(?:www[.])?opensource[.]org/licenses/Zlib",
    "https?://(?:www[.])?fedoraproject[.]org/wiki/Licensing/ZlibWithAcknowledgement",
    "Permission is granted to anyone to use this software for any purpose,? including"
    " commercial applications,? and to alter it and redistribute it freely,?"
    " subject to the following restrictions[,.;:]?",
    "(?:The )?zlib/libpng License(?: with Acknowledgement)?",
    "(?:The )?zlib/libpng License [(]Zlib[)]",
    "zlib licen[cs]e",
)

ZPL = _license(
    r"<license> <name> ?Zope Public License,?(?: version \d[.]?\d?)? ?</name>.*",
    r"<license> <name> ?ZPL-\d[.]?\d? ?</name>.*",
    r".*SPDX-License-Identifier: ZPL-\d[.]?\d?",
    r"https?://(?:www[.])?opensource[.]org/licenses/ZPL-\d[.]?\d?",
    "This product includes software developed by Zope Corporation",
    "Names associated with Zope or Zope Corporation must not be used",
    "The name Zope Corporation ?[(]tm[)] must not be used",
    "Names of the copyright holders must not be used to endorse or promote products"
    " derived from this software without prior written permission from the"
    " copyright holders[,;:.]?",
    r"Zope Public License(?: [(]?ZPL[)]?)?(?: Version)?(?: \d[.]?\d?)?",
)

# ── Lookup ──────────────────────────────────────────────────────────────

CATALOGUE: MappingProxyType[str, Rule] = MappingProxyType({
    "AFL2.1": AFL2_1,
    "AFL3.0": AFL3_0,
    "AGPL": AGPL,
    "ANDROID": ANDROID,
    "APACHE1.1": APACHE1_1,
    "APACHE2": APACHE2,
    "ARTISTIC_LICENSE": ARTISTIC_LICENSE,
    "BEER_WARE": BEER_WARE,
    "BOOST": BSL1_0,
    "BSD": BSD,
    "BSL1.0": BSL1_0,
    "CC0": CC0,
    "CC_BY_C": CC_BY_C,
    "CC_BY_NC": CC_BY_NC,
    "CLANG_LLVM": CLANG_LLVM,
    "COMMONS_CLAUSE": COMMONS_CLAUSE,
    "CPAL": CPAL,
    "EDL": EDL,
    "EPL": EPL,
    "EUPL": EUPL,
    "EXAMPLES": EXAMPLES,
    "FTL": FTL,
    "GOOGLE": GOOGLE,
    "GPL": GPL,
    "GPL2": GPL2,
    "GPL3": GPL3,
    "ISC": ISC,
    "JSON": JSON,
    "LGPL": LGPL,
    "LIBTIFF": LIBTIFF,
    "LPL1.02": LPL1_02,
    "MIT": MIT,
    "MS-PL": MSPL,
    "NCSA": NCSA,
    "NON_COMMERCIAL": NON_COMMERCIAL,
    "NOT_A_CONTRIBUTION": NOT_A_CONTRIBUTION,
    "OPENSSL": OPENSSL,
    "PSF": PSF,
    "PSFL": PSFL,
    "SISSL": SISSL,
    "SSPL": SSPL,
    "UNICODE": UNICODE,
    "UNLICENSE": UNLICENSE,
    "UPL": UPL,
    "W3C": W3C,
    "WATCOM": WATCOM,
    "WTFPL": WTFPL,
    "XNET": XNET,
    "ZEND": ZEND,
    "ZLIB": ZLIB,
    "ZPL": ZPL,
})


def known_rule_names() -> tuple[str, ...]:
    return tuple(sorted(CATALOGUE))


def edit_distance(a: str, b: str) -> int:
    """Levenshtein distance between two rule names."""
    return Levenshtein.distance(a, b)


def _or_join(names: tuple[str, ...]) -> str:
    if len(names) < 2:
        return "".join(names)
    return ", ".join(names[:-1]) + " or " + names[-1]


def lookup_rule(name: str) -> Rule:
    """Return the catalogue entry for ``name`` (exact, case-sensitive).

    Unknown names raise ``UnknownRuleError``. When the closest catalogue
    names are within an edit distance of 2 they are offered as suggestions;
    otherwise the message lists every known name.
    """
    rule = CATALOGUE.get(name)
    if rule is not None:
        return rule

    names = known_rule_names()
    distances = {known: edit_distance(name, known) for known in names}
    best = min(distances.values())
    header = f"Unknown license or copyright owner name: {name}"
    if best < 3:
        suggestions = tuple(k for k in names if distances[k] == best)
        message = f"{header}\n\nDid you mean {_or_join(suggestions)}?"
    else:
        suggestions = ()
        message = f"{header}\n\nKnown names are: {_or_join(names)}."
    raise UnknownRuleError(name, suggestions, message)
